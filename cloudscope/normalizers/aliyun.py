"""Aliyun (Alibaba Cloud) normalizers: ECS, OSS and RAM."""

from __future__ import annotations

from typing import Any, Dict

from ..core.models import Resource
from ..core.registry import normalizers
from .base import NormalizerDefaults, build_resource, copy_listing, ensure_mapping, require, tag_value


@normalizers.normalizer(name="ecs", provider="aliyun")
def normalize_ecs(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an ECS instance."""
    raw = ensure_mapping(raw, "ecs")
    instance_id = require(raw, "instanceId", "ecs")
    tags = raw.get("tags")
    return build_resource(
        "ecs",
        raw,
        defaults,
        id=instance_id,
        name=tag_value(tags, "Name") or f"Instance {instance_id}",
        status=raw.get("status") or raw.get("state"),
        instanceType=raw.get("instanceType"),
        publicIp=raw.get("publicIp") or None,
        privateIp=raw.get("privateIp") or None,
        vpcId=raw.get("vpcId"),
        tags=tags,
    )


@normalizers.normalizer(name="oss", provider="aliyun")
def normalize_oss(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an OSS bucket."""
    raw = ensure_mapping(raw, "oss")
    bucket = require(raw, "bucketName", "oss")
    return build_resource(
        "oss",
        raw,
        defaults,
        id=bucket,
        name=bucket,
        creationDate=raw.get("creationDate") or None,
        **copy_listing(raw, "oss"),
    )


@normalizers.normalizer(name="ramRoles", provider="aliyun")
def normalize_ram_role(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    raw = ensure_mapping(raw, "ramRoles")
    role_id = raw.get("roleId") or require(raw, "roleName", "ramRoles")
    return build_resource(
        "ramRoles",
        raw,
        defaults,
        id=role_id,
        name=raw.get("roleName"),
        arn=raw.get("arn"),
        permissions=[],
    )


@normalizers.normalizer(name="ramUsers", provider="aliyun")
def normalize_ram_user(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    raw = ensure_mapping(raw, "ramUsers")
    user_id = require(raw, "userId", "ramUsers")
    return build_resource(
        "ramUsers",
        raw,
        defaults,
        id=user_id,
        name=raw.get("userName"),
        arn=raw.get("arn"),
        permissions=[],
    )
