"""AWS security and audit normalizers: KMS, Secrets Manager, CloudTrail, CloudWatch Logs."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, build_resource, ensure_mapping, require


@normalizers.normalizer(name="kms", provider="aws")
def normalize_kms_key(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a KMS key."""
    raw = ensure_mapping(raw, "kms")
    key_id = require(raw, "keyId", "kms")
    return build_resource(
        "kms",
        raw,
        defaults,
        id=key_id,
        name=raw.get("description") or key_id,
        status=raw.get("keyState"),
        arn=raw.get("arn"),
        keyUsage=raw.get("keyUsage"),
        creationDate=raw.get("creationDate"),
    )


@normalizers.normalizer(name="secrets", provider="aws")
def normalize_secret(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a Secrets Manager secret (metadata only)."""
    raw = ensure_mapping(raw, "secrets")
    name = require(raw, "name", "secrets")
    return build_resource(
        "secrets",
        raw,
        defaults,
        id=raw.get("arn") or name,
        name=name,
        arn=raw.get("arn"),
        description=raw.get("description"),
        lastChangedDate=raw.get("lastChangedDate"),
        rotationEnabled=raw.get("rotationEnabled"),
    )


@normalizers.normalizer(name="cloudtrail", provider="aws")
def normalize_trail(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a CloudTrail trail."""
    raw = ensure_mapping(raw, "cloudtrail")
    name = require(raw, "name", "cloudtrail")
    return build_resource(
        "cloudtrail",
        raw,
        defaults,
        id=raw.get("trailArn") or name,
        name=name,
        region_keys=("region", "homeRegion"),
        arn=raw.get("trailArn"),
        s3BucketName=raw.get("s3BucketName"),
        isMultiRegionTrail=raw.get("isMultiRegionTrail"),
        isLogging=raw.get("isLogging"),
    )


@normalizers.normalizer(name="cloudwatch", provider="aws")
def normalize_log_group(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a CloudWatch log group."""
    raw = ensure_mapping(raw, "cloudwatch")
    name = require(raw, "logGroupName", "cloudwatch")
    return build_resource(
        "cloudwatch",
        raw,
        defaults,
        id=name,
        name=name,
        arn=raw.get("arn"),
        retentionInDays=raw.get("retentionInDays"),
        storedBytes=raw.get("storedBytes"),
    )
