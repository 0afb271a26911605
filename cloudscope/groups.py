"""Resource group registry.

A resource group is a named, persisted subset of resource-type codes that
can replace the requested selection of an enumeration run. The whole
collection is stored under one key and read-modify-written on every change.

Concurrent writers in separate processes are last-write-wins; the lock only
serializes writers within this process.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from .constants import GROUPS_STORE_KEY
from .core.errors import CloudScopeError, GroupNotFoundError, PersistenceError, ValidationError
from .core.models import ResourceGroup
from .repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


class GroupFields(BaseModel):
    """Validated name and resource codes of a group."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str
    resources: List[str]

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Group name must not be empty")
        return value

    @field_validator("resources")
    @classmethod
    def _resources_not_empty(cls, value: List[str]) -> List[str]:
        codes: List[str] = []
        for code in value:
            code = code.strip()
            if code and code not in codes:
                codes.append(code)
        if not codes:
            raise ValueError("Group must contain at least one resource type")
        return codes


def _validate(name: Any, resources: Any) -> GroupFields:
    try:
        return GroupFields(name=name, resources=resources)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        message = first.get("msg", "Invalid resource group").replace("Value error, ", "")
        raise ValidationError(message, field=field) from e


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ResourceGroupRegistry:
    """CRUD over resource groups persisted in a KeyValueStore.

    Example:
        >>> registry = ResourceGroupRegistry(InMemoryStore())
        >>> group = registry.create("compute", ["ec2", "eks"])
        >>> registry.apply_selection(group.id)
        ['ec2', 'eks']
    """

    def __init__(self, store: KeyValueStore, key: str = GROUPS_STORE_KEY):
        self.store = store
        self.key = key
        self._lock = threading.Lock()

    def _read(self) -> List[ResourceGroup]:
        try:
            raw = self.store.get(self.key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read resource groups: {e}") from e
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise PersistenceError("Stored resource groups are not a list")
        try:
            return [ResourceGroup.from_dict(item) for item in raw]
        except (KeyError, TypeError) as e:
            raise PersistenceError(f"Stored resource group is malformed: {e}") from e

    def _write(self, groups: List[ResourceGroup]) -> None:
        try:
            self.store.set(self.key, [g.to_dict() for g in groups])
        except CloudScopeError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to save resource groups: {e}") from e

    @staticmethod
    def _index(groups: List[ResourceGroup], group_id: str) -> int:
        for i, group in enumerate(groups):
            if group.id == group_id:
                return i
        raise GroupNotFoundError(group_id)

    def list(self) -> List[ResourceGroup]:
        """List groups in creation order."""
        return self._read()

    def get(self, group_id: str) -> ResourceGroup:
        groups = self._read()
        return groups[self._index(groups, group_id)]

    def create(self, name: str, resources: List[str]) -> ResourceGroup:
        """Create and persist a group.

        Raises:
            ValidationError: If name or resources is empty (nothing is written)
            PersistenceError: If the store fails
        """
        fields = _validate(name, resources)
        group = ResourceGroup(
            id=str(uuid.uuid4()),
            name=fields.name,
            resources=fields.resources,
            created=_utc_now(),
        )
        with self._lock:
            groups = self._read()
            groups.append(group)
            self._write(groups)
        logger.info(f"Created resource group {group.id} ({group.name})")
        return group

    def update(
        self,
        group_id: str,
        name: Optional[str] = None,
        resources: Optional[List[str]] = None,
    ) -> ResourceGroup:
        """Patch a group's name and/or resources.

        Omitted fields keep their value; provided fields are validated the
        same way as on create.
        """
        with self._lock:
            groups = self._read()
            index = self._index(groups, group_id)
            current = groups[index]
            fields = _validate(
                current.name if name is None else name,
                current.resources if resources is None else resources,
            )
            updated = ResourceGroup(
                id=current.id,
                name=fields.name,
                resources=fields.resources,
                created=current.created,
            )
            groups[index] = updated
            self._write(groups)
        logger.info(f"Updated resource group {group_id}")
        return updated

    def delete(self, group_id: str) -> None:
        with self._lock:
            groups = self._read()
            del groups[self._index(groups, group_id)]
            self._write(groups)
        logger.info(f"Deleted resource group {group_id}")

    def apply_selection(self, group_id: str) -> List[str]:
        """Return the group's codes as a fresh selection.

        The result replaces, and is never merged with, any current selection.
        """
        return list(self.get(group_id).resources)
