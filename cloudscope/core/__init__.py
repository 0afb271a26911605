"""Core data model, graph types, errors and registries."""

from cloudscope.core.errors import (
    BackendError,
    CloudScopeError,
    EnumerationInProgressError,
    GroupNotFoundError,
    NormalizationError,
    PersistenceError,
    ValidationError,
)
from cloudscope.core.graph import Graph, GraphEdge, GraphNode, Position
from cloudscope.core.models import (
    Credential,
    EscalationTechnique,
    PermissionProfile,
    Provider,
    Resource,
    ResourceGroup,
    ResourceTypeDescriptor,
)
from cloudscope.core.registry import NormalizerRegistry, normalizers

__all__ = [
    "BackendError",
    "CloudScopeError",
    "EnumerationInProgressError",
    "GroupNotFoundError",
    "NormalizationError",
    "PersistenceError",
    "ValidationError",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "Position",
    "Credential",
    "EscalationTechnique",
    "PermissionProfile",
    "Provider",
    "Resource",
    "ResourceGroup",
    "ResourceTypeDescriptor",
    "NormalizerRegistry",
    "normalizers",
]
