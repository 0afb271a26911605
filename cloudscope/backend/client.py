"""Client for the external cloud backend.

The backend owns provider SDK access; this module only issues its three
JSON calls and converts every failure into a BackendError carrying a
human-readable message.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings, get_settings
from ..constants import GENERIC_BACKEND_ERROR
from ..core.errors import BackendError
from ..core.models import PermissionProfile
from .models import EnumerateResponse, EscalateResponse

logger = logging.getLogger(__name__)


class BackendClient(ABC):
    """Operations the enumeration core consumes from the backend."""

    @abstractmethod
    def enumerate(self, credential_id: Any, resource_type: str) -> Dict[str, Any]:
        """Enumerate resources for a credential.

        Args:
            credential_id: Backend credential id
            resource_type: ``"all"`` or a comma-joined list of type codes

        Returns:
            ``{"result": {payload_field: [raw items]}, "errors": [...]}``
        """

    @abstractmethod
    def escalate(self, credential_id: Any) -> PermissionProfile:
        """Fetch the permission profile of a credential."""

    @abstractmethod
    def stored_resources(self, credential_id: Any) -> Dict[str, Any]:
        """Return the backend's last persisted enumeration for a credential."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_BACKEND_ERROR
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return GENERIC_BACKEND_ERROR


class HttpBackendClient(BackendClient):
    """httpx-based client for the backend's ``/cloud`` endpoints.

    Example:
        >>> client = HttpBackendClient(base_url="http://localhost:8080/api", token="...")
        >>> client.enumerate(3, "all")["result"]["instances"]
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        headers = {"Content-Type": "application/json"}
        token = settings.backend_token if token is None else token
        if token:
            headers["Authorization"] = token
        self._client = httpx.Client(
            base_url=(base_url or settings.backend_url).rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout or settings.request_timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpBackendClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _post(self, path: str, body: Dict[str, Any]) -> Any:
        try:
            response = self._client.post(path, json=body)
        except httpx.RequestError as e:
            logger.error(f"Backend request to {path} failed: {type(e).__name__}")
            logger.debug(f"Full error for {path}: {e}")
            raise BackendError(f"Backend unreachable: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"Backend rejected {path} with {response.status_code}: {message}")
            raise BackendError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Backend returned invalid JSON for {path}", status_code=response.status_code) from e

    def enumerate(self, credential_id: Any, resource_type: str) -> Dict[str, Any]:
        body = self._post("/cloud/enumerate", {"credential_id": credential_id, "resource_type": resource_type})
        try:
            parsed = EnumerateResponse.model_validate(body)
        except PydanticValidationError as e:
            raise BackendError(f"Malformed enumerate response: {e.error_count()} validation error(s)") from e
        return {"result": parsed.result, "errors": parsed.errors}

    def escalate(self, credential_id: Any) -> PermissionProfile:
        body = self._post("/cloud/escalate", {"credential_id": credential_id})
        try:
            parsed = EscalateResponse.model_validate(body)
        except PydanticValidationError as e:
            raise BackendError(f"Malformed escalate response: {e.error_count()} validation error(s)") from e
        return parsed.result.to_profile()

    def stored_resources(self, credential_id: Any) -> Dict[str, Any]:
        body = self._post("/cloud/resources", {"credential_id": credential_id})
        if not isinstance(body, dict):
            raise BackendError("Malformed resources response")
        result = body.get("result")
        return result if isinstance(result, dict) else {}
