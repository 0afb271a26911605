"""Inventory views over normalized resources: filtering and region rollups."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .constants import ALL_TYPES
from .core.models import Resource


def filter_resources(
    resources: Iterable[Resource],
    resource_type: str = ALL_TYPES,
    region: str = ALL_TYPES,
) -> List[Resource]:
    """Keep resources matching a type and region; ``"all"`` matches anything."""
    return [
        r for r in resources
        if (resource_type == ALL_TYPES or r.type == resource_type)
        and (region == ALL_TYPES or r.region == region)
    ]


def summarize_by_region(resources: Iterable[Resource]) -> Dict[str, Dict[str, Any]]:
    """Count resources per region and per type within each region.

    Regions appear in the order they are first seen.

    Example:
        >>> summarize_by_region(resources)
        {'us-east-1': {'total': 3, 'by_type': {'ec2': 2, 's3': 1}}}
    """
    summary: Dict[str, Dict[str, Any]] = {}
    for resource in resources:
        entry = summary.setdefault(resource.region, {"total": 0, "by_type": {}})
        entry["total"] += 1
        entry["by_type"][resource.type] = entry["by_type"].get(resource.type, 0) + 1
    return summary


def regions(resources: Iterable[Resource]) -> List[str]:
    """Distinct regions in first-seen order."""
    return list(summarize_by_region(resources))
