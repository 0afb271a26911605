"""In-memory key-value store, mainly for tests and one-shot CLI runs."""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, Optional

from .base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store; values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            return True
