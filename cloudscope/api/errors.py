"""Error handling for the CloudScope API.

Domain errors from `cloudscope.core.errors` are translated to ``{error}``
JSON responses with a status code per error class; handlers can also raise
`APIError` directly.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from ..core.errors import (
    BackendError,
    CloudScopeError,
    EnumerationInProgressError,
    GroupNotFoundError,
    NormalizationError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Domain error -> HTTP status
STATUS_CODES = (
    (ValidationError, 400),
    (GroupNotFoundError, 404),
    (EnumerationInProgressError, 409),
    (BackendError, 502),
    (NormalizationError, 422),
    (PersistenceError, 500),
)


class APIError(Exception):
    """Base exception for API errors.

    Usage:
        raise APIError("Credential not found", status_code=404)
        raise APIError("Invalid input", status_code=400, details={"field": "name"})
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_response(self) -> Tuple[Response, int]:
        """Convert to Flask JSON response."""
        response: Dict[str, Any] = {"error": self.message}
        if self.details:
            response["details"] = self.details
        return jsonify(response), self.status_code


class NotFoundError(APIError):
    """Raised when a requested item is not found."""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message, status_code=404)


class ConflictError(APIError):
    """Raised when the request conflicts with current state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


def status_for(error: CloudScopeError) -> int:
    for error_type, status in STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500


def handle_api_errors(app: Flask) -> None:
    """Register error handlers with Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        return error.to_response()

    @app.errorhandler(CloudScopeError)
    def handle_domain_error(error: CloudScopeError):
        status = status_for(error)
        if status >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        else:
            logger.info(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code or 500

    @app.errorhandler(Exception)
    def handle_internal_error(error: Exception):
        logger.exception("Internal server error")
        return jsonify({"error": "Internal server error"}), 500
