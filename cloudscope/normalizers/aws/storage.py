"""AWS data store normalizers: S3 buckets, RDS instances and DynamoDB tables."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, build_resource, copy_listing, ensure_mapping, require


@normalizers.normalizer(name="s3", provider="aws")
def normalize_s3(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an S3 bucket together with its object listing."""
    raw = ensure_mapping(raw, "s3")
    bucket = require(raw, "bucketName", "s3")
    return build_resource(
        "s3",
        raw,
        defaults,
        id=bucket,
        name=bucket,
        creationDate=raw.get("creationDate") or None,
        **copy_listing(raw, "s3"),
    )


@normalizers.normalizer(name="rds", provider="aws")
def normalize_rds(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an RDS database instance."""
    raw = ensure_mapping(raw, "rds")
    identifier = require(raw, "dbInstanceIdentifier", "rds")
    return build_resource(
        "rds",
        raw,
        defaults,
        id=identifier,
        name=identifier,
        status=raw.get("status"),
        arn=raw.get("dbInstanceArn"),
        instanceClass=raw.get("dbInstanceClass"),
        engine=raw.get("engine"),
        engineVersion=raw.get("engineVersion"),
        endpoint=raw.get("endpoint"),
        allocatedStorage=raw.get("allocatedStorage"),
        multiAZ=raw.get("multiAZ"),
        backupRetentionPeriod=raw.get("backupRetentionPeriod"),
    )


@normalizers.normalizer(name="dynamodb", provider="aws")
def normalize_dynamodb(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a DynamoDB table."""
    raw = ensure_mapping(raw, "dynamodb")
    table = require(raw, "tableName", "dynamodb")
    return build_resource(
        "dynamodb",
        raw,
        defaults,
        id=table,
        name=table,
        status=raw.get("tableStatus"),
        arn=raw.get("tableArn"),
        itemCount=raw.get("itemCount"),
        tableSizeBytes=raw.get("tableSizeBytes"),
    )
