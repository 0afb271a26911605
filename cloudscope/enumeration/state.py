"""Enumeration run state machine.

State is an immutable snapshot; every transition is an event applied by the
pure `reduce` function. `EnumerationStore` serializes dispatches and
notifies subscribers with each new snapshot, so observers never see a
half-applied transition.

Example:
    >>> store = EnumerationStore()
    >>> unsubscribe = store.subscribe(lambda state, event: print(state.phase))
    >>> store.dispatch(RunStarted(credential_id=1, selection=("ec2",)))
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..constants import (
    API_PROGRESS_CODE,
    PROGRESS_COMPLETE,
    STATUS_CANCELLED,
    STATUS_PENDING,
    STATUS_WAITING,
)
from ..core.models import Resource

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Lifecycle phase of an enumeration run."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ProgressState(str, Enum):
    """State of a single progress entry."""
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ProgressState.DONE, ProgressState.ERROR, ProgressState.CANCELLED)


@dataclass(frozen=True)
class ProgressEntry:
    """Progress of one resource-type code (or the synthetic ``api`` entry)."""
    percent: int = 0
    status: str = STATUS_PENDING
    state: ProgressState = ProgressState.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {"percent": self.percent, "status": self.status, "state": self.state.value}


@dataclass(frozen=True)
class ProgressEvent:
    """Discrete progress signal delivered to subscribers."""
    code: str
    percent: int
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "percent": self.percent, "status": self.status}


@dataclass(frozen=True)
class EnumerationState:
    """Snapshot of an enumeration run for one credential."""
    phase: Phase = Phase.IDLE
    credential_id: Any = None
    selection: Tuple[str, ...] = ()
    progress: Dict[str, ProgressEntry] = field(default_factory=dict)
    resources: Tuple[Resource, ...] = ()
    error: Optional[str] = None
    summary: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.phase == Phase.RUNNING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "phase": self.phase.value,
            "credential_id": self.credential_id,
            "selection": list(self.selection),
            "progress": {code: entry.to_dict() for code, entry in self.progress.items()},
            "resources": [r.to_dict() for r in self.resources],
            "error": self.error,
            "summary": self.summary,
            "warnings": list(self.warnings),
        }


# Events


@dataclass(frozen=True)
class RunStarted:
    credential_id: Any
    selection: Tuple[str, ...]


@dataclass(frozen=True)
class ProgressUpdated:
    code: str
    percent: int
    status: str
    state: ProgressState = ProgressState.RUNNING


@dataclass(frozen=True)
class ResourcesAppended:
    resources: Tuple[Resource, ...]


@dataclass(frozen=True)
class RunCompleted:
    summary: str
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RunFailed:
    error: str


@dataclass(frozen=True)
class RunCancelled:
    summary: str


@dataclass(frozen=True)
class RunReset:
    pass


Event = Union[RunStarted, ProgressUpdated, ResourcesAppended, RunCompleted, RunFailed, RunCancelled, RunReset]


def initial_progress(selection: Tuple[str, ...]) -> Dict[str, ProgressEntry]:
    """Fresh progress map: the ``api`` entry first, then one entry per code."""
    progress = {API_PROGRESS_CODE: ProgressEntry(status=STATUS_WAITING, state=ProgressState.RUNNING)}
    for code in selection:
        progress[code] = ProgressEntry()
    return progress


def _apply_progress(state: EnumerationState, event: ProgressUpdated) -> EnumerationState:
    current = state.progress.get(event.code)
    if current is None or current.state.is_terminal:
        return state
    percent = max(current.percent, min(max(int(event.percent), 0), PROGRESS_COMPLETE))
    progress = dict(state.progress)
    progress[event.code] = ProgressEntry(percent=percent, status=event.status, state=event.state)
    return replace(state, progress=progress)


def _cancel_remaining(progress: Dict[str, ProgressEntry]) -> Dict[str, ProgressEntry]:
    return {
        code: entry if entry.state.is_terminal
        else ProgressEntry(percent=entry.percent, status=STATUS_CANCELLED, state=ProgressState.CANCELLED)
        for code, entry in progress.items()
    }


def reduce(state: EnumerationState, event: Event) -> EnumerationState:
    """Apply one event to a state snapshot and return the next snapshot.

    Per-code percent never decreases and terminal entries are never
    rewritten within a run.
    """
    if isinstance(event, RunStarted):
        return EnumerationState(
            phase=Phase.RUNNING,
            credential_id=event.credential_id,
            selection=tuple(event.selection),
            progress=initial_progress(tuple(event.selection)),
        )
    if isinstance(event, ProgressUpdated):
        return _apply_progress(state, event)
    if isinstance(event, ResourcesAppended):
        return replace(state, resources=state.resources + tuple(event.resources))
    if isinstance(event, RunCompleted):
        return replace(
            state,
            phase=Phase.COMPLETED,
            summary=event.summary,
            warnings=tuple(event.warnings),
        )
    if isinstance(event, RunFailed):
        return replace(
            state,
            phase=Phase.FAILED,
            progress={},
            resources=(),
            error=event.error,
            summary=None,
        )
    if isinstance(event, RunCancelled):
        return replace(
            state,
            phase=Phase.CANCELLED,
            progress=_cancel_remaining(state.progress),
            summary=event.summary,
        )
    if isinstance(event, RunReset):
        return EnumerationState()
    raise TypeError(f"Unknown enumeration event: {type(event).__name__}")


Subscriber = Callable[[EnumerationState, Optional[ProgressEvent]], None]


class EnumerationStore:
    """Holds the current state and fans out every transition to subscribers."""

    def __init__(self, initial: Optional[EnumerationState] = None):
        self._state = initial or EnumerationState()
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []

    @property
    def state(self) -> EnumerationState:
        return self._state

    def dispatch(self, event: Event) -> EnumerationState:
        """Reduce an event and notify subscribers in dispatch order."""
        with self._lock:
            previous = self._state
            self._state = reduce(previous, event)
            if self._state is previous:
                return previous
            progress_event = None
            if isinstance(event, ProgressUpdated):
                entry = self._state.progress[event.code]
                progress_event = ProgressEvent(code=event.code, percent=entry.percent, status=entry.status)
            for subscriber in list(self._subscribers):
                try:
                    subscriber(self._state, progress_event)
                except Exception as e:
                    logger.warning(f"Enumeration subscriber failed: {type(e).__name__}")
                    logger.debug(f"Full subscriber error: {e}")
            return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
