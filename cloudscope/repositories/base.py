"""Abstract key-value store used for resource group persistence.

The group registry depends only on this interface, so the backing store can
be a JSON file, memory (tests), or any other key-value service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Minimal key-value persistence interface.

    Values are JSON-compatible Python objects. Implementations raise
    PersistenceError when the underlying storage fails.

    Example:
        >>> store = JsonFileStore(Path("~/.cloudscope/groups.json"))
        >>> store.set("resourceGroups", [])
        >>> store.get("resourceGroups")
        []
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under a key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if the key existed
        """
        pass
