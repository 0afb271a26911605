"""Key-value persistence for resource groups."""

from cloudscope.repositories.base import KeyValueStore
from cloudscope.repositories.json_store import JsonFileStore
from cloudscope.repositories.memory import InMemoryStore

__all__ = [
    "KeyValueStore",
    "JsonFileStore",
    "InMemoryStore",
]
