"""Enumeration runs: state machine and orchestrator."""

from cloudscope.enumeration.orchestrator import EnumerationOrchestrator
from cloudscope.enumeration.state import (
    EnumerationState,
    EnumerationStore,
    Phase,
    ProgressEntry,
    ProgressEvent,
    ProgressState,
    reduce,
)

__all__ = [
    "EnumerationOrchestrator",
    "EnumerationState",
    "EnumerationStore",
    "Phase",
    "ProgressEntry",
    "ProgressEvent",
    "ProgressState",
    "reduce",
]
