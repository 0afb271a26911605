"""Canonical data model for enumeration runs, resource groups and permissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import NormalizationError

# Reserved keys of a flattened resource dict
CORE_RESOURCE_KEYS = ("id", "name", "type", "status", "region")

# userType values after which no escalation is meaningful
TERMINAL_USER_TYPES = frozenset({"root", "root user", "administrator"})


class Provider(str, Enum):
    """Cloud providers known to the backend.

    Values are the provider strings stored on credentials by the backend.
    """

    AWS = "AWS"
    ALIYUN = "阿里云"
    GCP = "GCP"
    AZURE = "Azure"

    @classmethod
    def resolve(cls, value: Any) -> Optional["Provider"]:
        """Map a credential provider string to a Provider, or None if unknown."""
        if isinstance(value, Provider):
            return value
        if not isinstance(value, str):
            return None
        needle = value.strip().lower()
        for provider in cls:
            if needle in (provider.value.lower(), provider.name.lower()):
                return provider
        return _PROVIDER_ALIASES.get(needle)


_PROVIDER_ALIASES = {
    "alibaba": Provider.ALIYUN,
    "alibabacloud": Provider.ALIYUN,
    "google": Provider.GCP,
}


@dataclass(frozen=True)
class Credential:
    """The slice of a stored AKSK credential the enumeration core needs.

    Attributes:
        id: Backend credential id
        provider: Provider string as stored by the credential service
        region: Default region used when a raw item carries none
        name: Display name
    """

    id: Any
    provider: str
    region: str = ""
    name: str = ""

    @property
    def provider_enum(self) -> Optional[Provider]:
        return Provider.resolve(self.provider)

    @property
    def display_name(self) -> str:
        return f"{self.name or self.id} ({self.provider})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        return cls(
            id=data["id"],
            provider=data.get("provider") or data.get("cloudProvider") or "",
            region=data.get("region") or "",
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class ResourceTypeDescriptor:
    code: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "label": self.label}


@dataclass
class Resource:
    """Canonical resource record.

    The five core fields are always non-empty strings; everything
    type-specific lives in `attributes` and is flattened by `to_dict`.
    """

    id: str
    name: str
    type: str
    status: str
    region: str
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key in CORE_RESOURCE_KEYS:
            value = getattr(self, key)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise NormalizationError(f"Resource field '{key}' is empty", resource_type=self.type or None)
            if not isinstance(value, str):
                setattr(self, key, str(value))

    @property
    def key(self) -> Tuple[str, str, str]:
        """Uniqueness key: id is unique within (type, region)."""
        return (self.type, self.region, self.id)

    def get(self, attribute: str, default: Any = None) -> Any:
        return self.attributes.get(attribute, default)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "region": self.region,
        }
        for key, value in self.attributes.items():
            if key not in CORE_RESOURCE_KEYS:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            type=data.get("type"),
            status=data.get("status"),
            region=data.get("region"),
            attributes={k: v for k, v in data.items() if k not in CORE_RESOURCE_KEYS},
        )


@dataclass
class ResourceGroup:
    """A named, persisted subset of resource-type codes."""

    id: str
    name: str
    resources: List[str]
    created: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "resources": list(self.resources),
            "created": self.created,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceGroup":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            resources=list(data.get("resources") or []),
            created=data.get("created", ""),
        )


@dataclass
class PermissionProfile:
    """Permission summary returned by the backend escalate call."""

    user_type: str
    permissions: List[str] = field(default_factory=list)
    risk_level: str = "Unknown"
    user: Optional[str] = None
    role: Optional[str] = None
    potential_escalation: List[str] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        """True for root/administrator profiles where escalation is moot."""
        return self.user_type.strip().lower() in TERMINAL_USER_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userType": self.user_type,
            "user": self.user,
            "role": self.role,
            "permissions": list(self.permissions),
            "riskLevel": self.risk_level,
            "potentialEscalation": list(self.potential_escalation),
        }


@dataclass(frozen=True)
class EscalationTechnique:
    """Static catalog entry describing a known privilege-escalation technique."""

    id: str
    name: str
    description: str
    type: str
    risk: str
    permissions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "risk": self.risk,
            "permissions": list(self.permissions),
        }
