"""AWS IAM normalizers."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, build_resource, ensure_mapping, require


@normalizers.normalizer(name="iamRoles", provider="aws")
@normalizers.normalizer(name="iamRoles", provider="gcp")
def normalize_iam_role(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an IAM role.

    AWS roles are keyed by ``roleId``; GCP predefined roles carry only a
    ``roleName`` such as ``roles/compute.admin``, which is used instead.
    """
    raw = ensure_mapping(raw, "iamRoles")
    role_id = raw.get("roleId") or require(raw, "roleName", "iamRoles")
    return build_resource(
        "iamRoles",
        raw,
        defaults,
        id=role_id,
        name=raw.get("roleName"),
        arn=raw.get("arn"),
        description=raw.get("description"),
        permissions=[],
    )


@normalizers.normalizer(name="iamUsers", provider="aws")
@normalizers.normalizer(name="iamUsers", provider="gcp")
def normalize_iam_user(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an IAM user."""
    raw = ensure_mapping(raw, "iamUsers")
    user_id = require(raw, "userId", "iamUsers")
    return build_resource(
        "iamUsers",
        raw,
        defaults,
        id=user_id,
        name=raw.get("userName"),
        arn=raw.get("arn"),
        email=raw.get("email"),
        permissions=[],
    )
