"""Shared id and edge helpers for the graph synthesizers."""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Set

from ..core.graph import GraphEdge
from ..core.models import Resource

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


def sanitize_id(value: Any) -> str:
    """Replace every non-alphanumeric character with ``_``."""
    return _UNSAFE.sub("_", str(value))


def node_id(kind: str, value: Any) -> str:
    return f"{kind}-{sanitize_id(value)}"


def unique_node_id(kind: str, value: Any, used: Set[str]) -> str:
    """Node id for ``value`` that is not in ``used``; records the result.

    Values that sanitize to an id already taken get a ``_<n>`` suffix, so
    the first resource seen keeps the plain id.
    """
    base = node_id(kind, value)
    candidate = base
    suffix = 1
    while candidate in used:
        candidate = f"{base}_{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def edge(source: str, target: str, hint: Optional[str] = None, label: Optional[str] = None) -> GraphEdge:
    return GraphEdge(id=f"{source}->{target}", source=source, target=target, hint=hint, label=label)


def as_resources(items: Iterable[Any]) -> List[Resource]:
    """Accept Resource objects or their flattened dicts."""
    return [item if isinstance(item, Resource) else Resource.from_dict(item) for item in items]
