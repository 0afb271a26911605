"""Graph view models produced by the topology and escalation synthesizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class GraphNode:
    """A positioned node.

    Attributes:
        id: Graph-library-safe identifier
        label: Display text
        position: Layout coordinates
        style: Style tag consumed by the renderer (e.g. "vpc", "risk-high")
        data: Extra display fields (descriptions, counts)
    """

    id: str
    label: str
    position: Position
    style: str = "default"
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "position": self.position.to_dict(),
            "style": self.style,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        pos = data.get("position") or {}
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            position=Position(x=pos.get("x", 0), y=pos.get("y", 0)),
            style=data.get("style", "default"),
            data=dict(data.get("data") or {}),
        )


@dataclass
class GraphEdge:
    """A directed edge between two node ids."""

    id: str
    source: str
    target: str
    hint: Optional[str] = None
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "source": self.source, "target": self.target}
        if self.hint is not None:
            result["hint"] = self.hint
        if self.label is not None:
            result["label"] = self.label
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            hint=data.get("hint"),
            label=data.get("label"),
        )


@dataclass
class Graph:
    """Container for a node/edge view."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            nodes=[GraphNode.from_dict(n) for n in data.get("nodes", [])],
            edges=[GraphEdge.from_dict(e) for e in data.get("edges", [])],
        )
