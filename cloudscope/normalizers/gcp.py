"""GCP normalizers for Compute Engine instances and Cloud Storage buckets.

IAM roles and users share the AWS normalizers (see ``aws/iam.py``).
"""

from __future__ import annotations

from typing import Any, Dict

from ..core.models import Resource
from ..core.registry import normalizers
from .base import NormalizerDefaults, build_resource, copy_listing, ensure_mapping, require


@normalizers.normalizer(name="compute", provider="gcp")
def normalize_compute_instance(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a Compute Engine instance."""
    raw = ensure_mapping(raw, "compute")
    instance_id = require(raw, "instanceId", "compute")
    return build_resource(
        "compute",
        raw,
        defaults,
        id=instance_id,
        name=raw.get("name") or f"Instance {instance_id}",
        status=raw.get("status"),
        region_keys=("region", "zone"),
        instanceType=raw.get("instanceType"),
        publicIp=raw.get("publicIp") or None,
        privateIp=raw.get("privateIp") or None,
        # network tags are a plain list of strings on GCP
        tags=raw.get("tags"),
    )


@normalizers.normalizer(name="storage", provider="gcp")
def normalize_storage_bucket(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize a Cloud Storage bucket."""
    raw = ensure_mapping(raw, "storage")
    bucket = require(raw, "bucketName", "storage")
    return build_resource(
        "storage",
        raw,
        defaults,
        id=bucket,
        name=bucket,
        region_keys=("region", "location"),
        creationDate=raw.get("creationDate") or None,
        **copy_listing(raw, "storage"),
    )
