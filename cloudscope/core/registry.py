"""Plugin-style registries keyed by ``provider:name``.

Normalizers register themselves with a decorator at import time:

    @normalizers.normalizer(name="ec2", provider="aws")
    def normalize_ec2(raw, defaults):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PROVIDER = "aws"


def provider_key(provider: Any) -> str:
    """Normalize a provider (enum or string) to its registry key."""
    from .models import Provider

    resolved = Provider.resolve(provider)
    if resolved is not None:
        return resolved.name.lower()
    return str(provider or DEFAULT_PROVIDER).strip().lower()


class BaseRegistry(Generic[T]):
    """Registry of named items scoped by provider."""

    def __init__(self) -> None:
        self._items: Dict[str, T] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def _key(name: str, provider: Any) -> str:
        return f"{provider_key(provider)}:{name}"

    def register(
        self,
        name: str,
        item: T,
        provider: Any = DEFAULT_PROVIDER,
        description: str = "",
        **metadata: Any,
    ) -> T:
        """Register an item and return it unchanged."""
        key = self._key(name, provider)
        if key in self._items:
            logger.debug(f"Replacing registry entry {key}")
        self._items[key] = item
        self._metadata[key] = {
            "name": name,
            "provider": provider_key(provider),
            "description": description,
            **metadata,
        }
        return item

    def get(self, name: str, provider: Any = DEFAULT_PROVIDER) -> Optional[T]:
        return self._items.get(self._key(name, provider))

    def get_all(self, provider: Any = None) -> Dict[str, T]:
        if provider is None:
            return dict(self._items)
        prefix = f"{provider_key(provider)}:"
        return {k: v for k, v in self._items.items() if k.startswith(prefix)}

    def list_names(self, provider: Any = None) -> List[str]:
        return [self._metadata[key]["name"] for key in self.get_all(provider)]

    def get_metadata(self, name: str, provider: Any = DEFAULT_PROVIDER) -> Optional[Dict[str, Any]]:
        meta = self._metadata.get(self._key(name, provider))
        return dict(meta) if meta is not None else None

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} items={len(self._items)}>"


class NormalizerRegistry(BaseRegistry[Callable[..., Any]]):
    """Registry of per-type normalizer functions."""

    def normalizer(
        self,
        name: str,
        provider: Any = DEFAULT_PROVIDER,
        description: str = "",
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a normalizer for one resource-type code."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            doc_lines = (func.__doc__ or "").strip().splitlines()
            self.register(
                name=name,
                item=func,
                provider=provider,
                description=description or (doc_lines[0] if doc_lines else ""),
            )
            return func

        return decorator


# Global registry populated by cloudscope.normalizers
normalizers = NormalizerRegistry()
