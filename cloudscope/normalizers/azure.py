"""Azure normalizers: virtual machines, storage accounts and role assignments."""

from __future__ import annotations

from typing import Any, Dict

from ..core.models import Resource
from ..core.registry import normalizers
from .base import NormalizerDefaults, arn_tail, build_resource, ensure_mapping, require


@normalizers.normalizer(name="compute", provider="azure")
def normalize_virtual_machine(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an Azure virtual machine."""
    raw = ensure_mapping(raw, "compute")
    vm_id = require(raw, "vmId", "compute")
    return build_resource(
        "compute",
        raw,
        defaults,
        id=vm_id,
        name=raw.get("vmName"),
        status=raw.get("status"),
        region_keys=("region", "location"),
        size=raw.get("size"),
        publicIp=raw.get("publicIp") or None,
        privateIp=raw.get("privateIp") or None,
        resourceGroup=raw.get("resourceGroup"),
    )


@normalizers.normalizer(name="storage", provider="azure")
def normalize_storage_account(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an Azure storage account."""
    raw = ensure_mapping(raw, "storage")
    account_id = require(raw, "accountId", "storage")
    return build_resource(
        "storage",
        raw,
        defaults,
        id=account_id,
        name=raw.get("accountName") or arn_tail(str(account_id)),
        region_keys=("region", "location"),
        sku=raw.get("sku"),
        kind=raw.get("kind"),
    )


@normalizers.normalizer(name="roleAssignments", provider="azure")
def normalize_role_assignment(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an Azure RBAC role assignment."""
    raw = ensure_mapping(raw, "roleAssignments")
    assignment_id = require(raw, "assignmentId", "roleAssignments")
    return build_resource(
        "roleAssignments",
        raw,
        defaults,
        id=assignment_id,
        name=raw.get("roleName") or arn_tail(str(assignment_id)),
        roleDefinitionId=raw.get("roleDefinitionId"),
        principalId=raw.get("principalId"),
        scope=raw.get("scope"),
    )
