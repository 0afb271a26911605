"""AWS compute normalizers: EC2 instances, EKS clusters and Lambda functions."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, build_resource, ensure_mapping, first_present, require, tag_value


@normalizers.normalizer(name="ec2", provider="aws")
def normalize_ec2(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an EC2 instance."""
    raw = ensure_mapping(raw, "ec2")
    instance_id = require(raw, "instanceId", "ec2")
    tags = raw.get("tags")
    return build_resource(
        "ec2",
        raw,
        defaults,
        id=instance_id,
        name=tag_value(tags, "Name") or f"Instance {instance_id}",
        status=raw.get("state"),
        instanceType=raw.get("instanceType"),
        publicIp=raw.get("publicIp") or None,
        privateIp=raw.get("privateIp") or None,
        vpcId=raw.get("vpcId"),
        subnetId=raw.get("subnetId"),
        tags=tags,
    )


@normalizers.normalizer(name="eks", provider="aws")
def normalize_eks(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an EKS cluster."""
    raw = ensure_mapping(raw, "eks")
    name = require(raw, "name", "eks")
    vpc_config = raw.get("resourcesVpcConfig") or {}
    return build_resource(
        "eks",
        raw,
        defaults,
        id=name,
        name=name,
        status=raw.get("status"),
        arn=raw.get("arn"),
        version=raw.get("version"),
        endpoint=raw.get("endpoint"),
        roleArn=raw.get("roleArn"),
        createdAt=raw.get("createdAt"),
        vpcId=first_present(vpc_config, ("VpcId", "vpcId")) if isinstance(vpc_config, dict) else None,
    )


@normalizers.normalizer(name="lambda", provider="aws")
def normalize_lambda(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a Lambda function."""
    raw = ensure_mapping(raw, "lambda")
    function_name = require(raw, "functionName", "lambda")
    return build_resource(
        "lambda",
        raw,
        defaults,
        id=function_name,
        name=function_name,
        arn=raw.get("functionArn"),
        runtime=raw.get("runtime"),
        handler=raw.get("handler"),
        role=raw.get("role"),
        memorySize=raw.get("memorySize"),
        lastModified=raw.get("lastModified"),
    )
