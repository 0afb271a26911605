"""AWS network normalizers: VPCs, route tables, load balancers and API gateways."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, build_resource, ensure_mapping, require, tag_value


@normalizers.normalizer(name="vpc", provider="aws")
def normalize_vpc(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a VPC."""
    raw = ensure_mapping(raw, "vpc")
    vpc_id = require(raw, "vpcId", "vpc")
    tags = raw.get("tags")
    return build_resource(
        "vpc",
        raw,
        defaults,
        id=vpc_id,
        name=tag_value(tags, "Name") or vpc_id,
        status=raw.get("state"),
        cidrBlock=raw.get("cidrBlock"),
        isDefault=raw.get("isDefault"),
        ownerId=raw.get("ownerId"),
        tags=tags,
    )


@normalizers.normalizer(name="route", provider="aws")
def normalize_route_table(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a route table."""
    raw = ensure_mapping(raw, "route")
    table_id = require(raw, "routeTableId", "route")
    tags = raw.get("tags")
    return build_resource(
        "route",
        raw,
        defaults,
        id=table_id,
        name=tag_value(tags, "Name") or table_id,
        vpcId=raw.get("vpcId"),
        routes=raw.get("routes"),
        tags=tags,
    )


@normalizers.normalizer(name="elb", provider="aws")
def normalize_elb(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an elastic load balancer."""
    raw = ensure_mapping(raw, "elb")
    name = require(raw, "loadBalancerName", "elb")
    return build_resource(
        "elb",
        raw,
        defaults,
        id=raw.get("loadBalancerArn") or name,
        name=name,
        status=raw.get("state"),
        arn=raw.get("loadBalancerArn"),
        loadBalancerType=raw.get("type"),
        dnsName=raw.get("dnsName"),
        vpcId=raw.get("vpcId"),
        availabilityZones=raw.get("availabilityZones"),
        securityGroups=raw.get("securityGroups"),
    )


@normalizers.normalizer(name="apigateway", provider="aws")
def normalize_api_gateway(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a REST or HTTP API gateway."""
    raw = ensure_mapping(raw, "apigateway")
    api_id = raw.get("apiId") or require(raw, "id", "apigateway")
    return build_resource(
        "apigateway",
        raw,
        defaults,
        id=api_id,
        name=raw.get("name"),
        description=raw.get("description"),
        protocolType=raw.get("protocolType"),
        endpoint=raw.get("apiEndpoint"),
        createdDate=raw.get("createdDate"),
    )
