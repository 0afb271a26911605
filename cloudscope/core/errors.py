"""Error taxonomy shared by the catalog, orchestrator, normalizers and registry.

Usage:
    raise ValidationError("Group name must not be empty", field="name")
    raise BackendError("Credential not found", status_code=404)
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CloudScopeError(Exception):
    """Base exception for CloudScope errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the `{error: ...}` shape used on the wire."""
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(CloudScopeError):
    """Raised for invalid input before any network call or persistence write."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details=details)
        self.field = field


class BackendError(CloudScopeError):
    """Raised when the enumeration backend rejects a call or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code else {}
        super().__init__(message, details=details)
        self.status_code = status_code


class NormalizationError(CloudScopeError):
    """Raised when a raw payload item cannot be turned into a Resource."""

    def __init__(self, message: str, resource_type: Optional[str] = None):
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, details=details)
        self.resource_type = resource_type


class PersistenceError(CloudScopeError):
    """Raised when the resource group store cannot be read or written."""


class GroupNotFoundError(CloudScopeError):
    """Raised when a resource group id is unknown."""

    def __init__(self, group_id: str):
        super().__init__(f"Resource group '{group_id}' not found", details={"id": group_id})
        self.group_id = group_id


class EnumerationInProgressError(CloudScopeError):
    """Raised when a second run starts for a credential that is already running."""

    def __init__(self, credential_id: Any):
        super().__init__(
            f"An enumeration is already running for credential {credential_id}",
            details={"credential_id": credential_id},
        )
        self.credential_id = credential_id
