"""Per-type resource normalizers.

Importing this package registers every provider's normalizers with
``cloudscope.core.registry.normalizers``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from cloudscope.catalog import entries
from cloudscope.core.errors import NormalizationError
from cloudscope.core.models import Resource
from cloudscope.core.registry import NormalizerRegistry, normalizers
from cloudscope.normalizers import aliyun, aws, azure, gcp  # noqa: F401
from cloudscope.normalizers.base import NormalizerDefaults

logger = logging.getLogger(__name__)


def normalize_items(
    code: str,
    provider: Any,
    items: Any,
    defaults: NormalizerDefaults,
    registry: Optional[NormalizerRegistry] = None,
) -> List[Resource]:
    """Normalize the raw items of one payload field.

    Args:
        code: Resource-type code
        provider: Provider enum or credential provider string
        items: Value of the payload field; None means the field was absent
        defaults: Credential-derived fallbacks
        registry: Registry to resolve the normalizer from

    Returns:
        Normalized resources in input order

    Raises:
        NormalizationError: If no normalizer is registered, the field is not
            a list, or any item is malformed
    """
    registry = registry or normalizers
    normalizer = registry.get(code, provider)
    if normalizer is None:
        raise NormalizationError(f"No normalizer registered for '{code}'", resource_type=code)
    if items is None:
        return []
    if not isinstance(items, list):
        raise NormalizationError(
            f"Expected a list for {code}, got {type(items).__name__}",
            resource_type=code,
        )
    resources = [normalizer(item, defaults) for item in items]
    logger.debug(f"Normalized {len(resources)} {code} item(s)")
    return resources


def normalize_payload(
    result: Dict[str, Any],
    provider: Any,
    defaults: NormalizerDefaults,
    registry: Optional[NormalizerRegistry] = None,
) -> List[Resource]:
    """Normalize every catalog type present in a stored backend result.

    Types that fail are skipped with a warning; used where no progress
    reporting is needed, such as rebuilding graphs from stored results.
    """
    resources: List[Resource] = []
    for entry in entries(provider):
        items = result.get(entry.payload_field)
        if items is None:
            continue
        try:
            resources.extend(normalize_items(entry.type.value, provider, items, defaults, registry=registry))
        except NormalizationError as e:
            logger.warning(f"Skipping {entry.type.value}: {e.message}")
    return resources


__all__ = ["NormalizerDefaults", "normalize_items", "normalize_payload"]
