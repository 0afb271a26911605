"""Graph synthesizers for topology and privilege-escalation views."""

from cloudscope.graphs.escalation import (
    build_attack_path,
    build_escalation_graph,
    escalation_summary,
    match_techniques,
)
from cloudscope.graphs.layout import sanitize_id
from cloudscope.graphs.techniques import TECHNIQUES
from cloudscope.graphs.topology import build_topology

__all__ = [
    "build_attack_path",
    "build_escalation_graph",
    "build_topology",
    "escalation_summary",
    "match_techniques",
    "sanitize_id",
    "TECHNIQUES",
]
