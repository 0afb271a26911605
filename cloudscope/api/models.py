"""Pydantic request models for the CloudScope API."""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from ..core.models import Credential


class CredentialModel(BaseModel):
    """Credential slice sent by the caller."""

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    provider: str
    region: str = ""
    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_cloud_provider(cls, data: Any) -> Any:
        if isinstance(data, dict) and "provider" not in data and "cloudProvider" in data:
            data = dict(data, provider=data["cloudProvider"])
        return data

    def to_credential(self) -> Credential:
        return Credential(id=self.id, provider=self.provider, region=self.region, name=self.name)


class EnumerationRequest(BaseModel):
    """Body of ``POST /enumerations``: explicit types or a saved group."""

    credential: CredentialModel
    resources: Optional[List[str]] = None
    group_id: Optional[str] = None

    @model_validator(mode="after")
    def _one_selection_source(self) -> "EnumerationRequest":
        if self.resources is None and self.group_id is None:
            self.resources = ["all"]
        if self.resources is not None and self.group_id is not None:
            raise ValueError("Provide either resources or group_id, not both")
        return self


class GroupCreateRequest(BaseModel):
    name: str
    resources: List[str]


class GroupUpdateRequest(BaseModel):
    name: Optional[str] = None
    resources: Optional[List[str]] = None


class EscalationRequest(BaseModel):
    credential_id: Union[int, str]
    force: bool = False


class AttackPathRequest(BaseModel):
    """Body of ``POST /graphs/attack-path``."""

    credential: CredentialModel
