"""Backend client and response models."""

from cloudscope.backend.client import BackendClient, HttpBackendClient
from cloudscope.backend.models import EnumerateResponse, EscalateResponse, PermissionProfileModel

__all__ = [
    "BackendClient",
    "HttpBackendClient",
    "EnumerateResponse",
    "EscalateResponse",
    "PermissionProfileModel",
]
