"""Shared helpers for per-type normalizers.

Every normalizer has the signature ``(raw, defaults) -> Resource`` and is a
pure function of its inputs. Helpers here raise NormalizationError for
malformed items so the orchestrator can isolate the failing type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from ..core.errors import NormalizationError
from ..core.models import Resource

DEFAULT_STATUS = "active"


@dataclass(frozen=True)
class NormalizerDefaults:
    """Credential-derived fallbacks applied to raw items."""

    region: str
    provider: str = ""


def ensure_mapping(raw: Any, resource_type: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise NormalizationError(
            f"Expected an object for {resource_type}, got {type(raw).__name__}",
            resource_type=resource_type,
        )
    return raw


def require(raw: Mapping[str, Any], key: str, resource_type: str) -> Any:
    """Return ``raw[key]`` or raise if it is missing or blank."""
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise NormalizationError(f"{resource_type} item is missing '{key}'", resource_type=resource_type)
    return value


def first_present(raw: Mapping[str, Any], keys: Iterable[str]) -> Optional[Any]:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def tag_value(tags: Any, key: str) -> Optional[str]:
    """Read a tag from either a ``{k: v}`` map or a ``[{Key, Value}]`` list."""
    if isinstance(tags, Mapping):
        value = tags.get(key)
        return value or None
    if isinstance(tags, list):
        for tag in tags:
            if isinstance(tag, Mapping) and tag.get("Key") == key:
                return tag.get("Value") or None
    return None


def state_text(value: Any) -> Optional[str]:
    """Flatten AWS state shapes such as ``{"Code": "active"}`` or ``{"Name": "running"}``."""
    if isinstance(value, Mapping):
        value = first_present(value, ("Name", "Code", "name", "code"))
    if value is None or value == "":
        return None
    return str(value)


def resolve_region(raw: Mapping[str, Any], defaults: NormalizerDefaults, *keys: str) -> str:
    region = first_present(raw, keys or ("region",))
    return str(region) if region else defaults.region


def arn_tail(arn: str) -> str:
    """Last path or colon segment of an ARN or URL."""
    return arn.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]


def build_resource(
    resource_type: str,
    raw: Mapping[str, Any],
    defaults: NormalizerDefaults,
    *,
    id: Any,
    name: Any = None,
    status: Any = None,
    region_keys: Iterable[str] = ("region",),
    **attributes: Any,
) -> Resource:
    """Assemble a Resource, applying name, status and region fallbacks.

    Attributes that are None are dropped so that absent backend fields do
    not show up as null keys.
    """
    status_value = state_text(status) or DEFAULT_STATUS
    return Resource(
        id=str(id),
        name=str(name) if name else str(id),
        type=resource_type,
        status=status_value,
        region=resolve_region(raw, defaults, *region_keys),
        attributes={k: v for k, v in attributes.items() if v is not None},
    )


def copy_listing(raw: Mapping[str, Any], resource_type: str) -> Dict[str, Any]:
    """Copy a bucket's object listing and truncation flag verbatim."""
    objects = raw.get("objects")
    if objects is None:
        objects = []
    if not isinstance(objects, list):
        raise NormalizationError(f"{resource_type} 'objects' must be a list", resource_type=resource_type)
    listing: Dict[str, Any] = {"objects": list(objects)}
    if "moreObjects" in raw:
        listing["moreObjects"] = raw["moreObjects"]
    return listing
