"""Pydantic models validating backend response bodies."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.models import PermissionProfile


class EnumerateResponse(BaseModel):
    """Body of ``POST /cloud/enumerate``.

    ``result`` maps payload fields (``instances``, ``buckets``, ...) to raw
    item lists; ``errors`` lists partial failures reported by the backend.
    """

    model_config = ConfigDict(extra="allow")

    result: Dict[str, Any] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)

    @field_validator("result", mode="before")
    @classmethod
    def _none_result(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("errors", mode="before")
    @classmethod
    def _stringify_errors(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value]
        return value


class PermissionProfileModel(BaseModel):
    """Permission summary inside the ``escalate`` response."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_type: str = Field(default="Unknown", alias="userType")
    user: Optional[str] = None
    role: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    risk_level: str = Field(default="Unknown", alias="riskLevel")
    potential_escalation: List[str] = Field(default_factory=list, alias="potentialEscalation")

    @field_validator("permissions", "potential_escalation", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_profile(self) -> PermissionProfile:
        return PermissionProfile(
            user_type=self.user_type,
            user=self.user,
            role=self.role,
            permissions=list(self.permissions),
            risk_level=self.risk_level,
            potential_escalation=list(self.potential_escalation),
        )


class EscalateResponse(BaseModel):
    """Body of ``POST /cloud/escalate``."""

    result: PermissionProfileModel
