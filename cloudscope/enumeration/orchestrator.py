"""Enumeration orchestrator.

Drives one backend ``enumerate`` call per run, then normalizes each
requested resource type in order while publishing progress through an
EnumerationStore. A failing type is recorded in its own progress entry and
never stops the remaining types; a failing backend call fails the whole
run.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Set

from ..api.metrics import track_enumeration, track_normalization_failure, track_resources_normalized
from ..catalog import Selection, expand, is_full_selection, payload_field
from ..config import Settings, get_settings
from ..constants import (
    ALL_TYPES,
    API_PROGRESS_CODE,
    DEFAULT_REGION,
    GENERIC_BACKEND_ERROR,
    PROGRESS_COMPLETE,
    STATUS_API_DONE,
    STATUS_NO_RESOURCES,
    STATUS_WAITING,
)
from ..core.errors import (
    BackendError,
    CloudScopeError,
    EnumerationInProgressError,
    NormalizationError,
    ValidationError,
)
from ..core.models import Credential, Resource
from ..core.registry import NormalizerRegistry, normalizers, provider_key
from ..normalizers import NormalizerDefaults, normalize_items
from .state import (
    EnumerationState,
    EnumerationStore,
    ProgressState,
    ProgressUpdated,
    ResourcesAppended,
    RunCancelled,
    RunCompleted,
    RunFailed,
    RunStarted,
)

logger = logging.getLogger(__name__)


def _message(error: BaseException) -> str:
    if isinstance(error, CloudScopeError):
        return error.message
    return str(error) or type(error).__name__


class EnumerationOrchestrator:
    """Runs enumerations and keeps the latest state per credential.

    Args:
        backend: BackendClient used for the single enumerate call
        registry: Normalizer registry (defaults to the global one)
        settings: Progress pacing settings
    """

    def __init__(
        self,
        backend: Any,
        registry: Optional[NormalizerRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.backend = backend
        self.registry = registry or normalizers
        self.settings = settings or get_settings()
        self._lock = threading.Lock()
        self._running: Set[str] = set()
        self._stores: Dict[str, EnumerationStore] = {}
        self._cancel_events: Dict[str, threading.Event] = {}

    def store_for(self, credential_id: Any) -> EnumerationStore:
        """Get (or create) the state store of a credential."""
        key = str(credential_id)
        with self._lock:
            store = self._stores.get(key)
            if store is None:
                store = self._stores[key] = EnumerationStore()
            return store

    def last_state(self, credential_id: Any) -> Optional[EnumerationState]:
        store = self._stores.get(str(credential_id))
        return store.state if store else None

    def is_running(self, credential_id: Any) -> bool:
        return str(credential_id) in self._running

    def cancel(self, credential_id: Any) -> bool:
        """Signal the running enumeration of a credential to stop.

        Returns:
            True if a run was in progress and has been signalled
        """
        with self._lock:
            event = self._cancel_events.get(str(credential_id))
        if event is None:
            return False
        event.set()
        logger.info(f"Cancellation requested for credential {credential_id}")
        return True

    def run(
        self,
        credential: Credential,
        requested: Selection,
        cancel_event: Optional[threading.Event] = None,
    ) -> EnumerationState:
        """Enumerate the requested resource types for a credential.

        Args:
            credential: Credential to enumerate with
            requested: Type codes, aliases or ``"all"``
            cancel_event: Optional event checked between resource types

        Returns:
            Final state of the run

        Raises:
            ValidationError: If the expanded selection is empty
            EnumerationInProgressError: If the credential already has a run in flight
            BackendError: If the backend call fails
        """
        selection = expand(requested, credential.provider)
        if not selection:
            raise ValidationError("No resource types selected", field="resources")

        key = str(credential.id)
        store = self.store_for(credential.id)
        with self._lock:
            if key in self._running:
                raise EnumerationInProgressError(credential.id)
            self._running.add(key)
            if cancel_event is None:
                cancel_event = threading.Event()
            self._cancel_events[key] = cancel_event
        try:
            return self._run(credential, selection, store, cancel_event)
        finally:
            with self._lock:
                self._running.discard(key)
                self._cancel_events.pop(key, None)

    def _run(
        self,
        credential: Credential,
        selection: tuple,
        store: EnumerationStore,
        cancel_event: threading.Event,
    ) -> EnumerationState:
        provider = provider_key(credential.provider)
        started = time.time()
        store.dispatch(RunStarted(credential_id=credential.id, selection=selection))

        resource_type = ALL_TYPES if is_full_selection(selection, credential.provider) else ",".join(selection)
        logger.info(f"Enumerating {len(selection)} resource type(s) for credential {credential.id} ({provider})")

        try:
            with self._api_ticker(store):
                response = self.backend.enumerate(credential.id, resource_type)
            result = response.get("result") if isinstance(response, dict) else None
            if not isinstance(result, dict):
                raise BackendError("Malformed enumerate response")
        except Exception as e:
            message = _message(e) or GENERIC_BACKEND_ERROR
            logger.error(f"Enumeration failed for credential {credential.id}: {message}")
            store.dispatch(RunFailed(error=message))
            track_enumeration(provider, "failed", time.time() - started)
            raise

        store.dispatch(ProgressUpdated(API_PROGRESS_CODE, PROGRESS_COMPLETE, STATUS_API_DONE, ProgressState.DONE))

        defaults = NormalizerDefaults(region=credential.region or DEFAULT_REGION, provider=credential.provider)
        processed = 0
        for code in selection:
            if cancel_event.is_set():
                summary = f"cancelled: {processed} of {len(selection)} resource types processed"
                logger.info(f"Enumeration for credential {credential.id} {summary}")
                state = store.dispatch(RunCancelled(summary=summary))
                track_enumeration(provider, "cancelled", time.time() - started)
                return state

            store.dispatch(ProgressUpdated(code, 0, "normalizing", ProgressState.RUNNING))
            try:
                resources = self._normalize_type(code, credential, result, defaults)
            except Exception as e:
                logger.warning(f"Failed to normalize {code}: {type(e).__name__}")
                logger.debug(f"Full error for {code}: {e}")
                track_normalization_failure(provider, code)
                store.dispatch(
                    ProgressUpdated(code, PROGRESS_COMPLETE, f"error: {_message(e)}", ProgressState.ERROR)
                )
            else:
                store.dispatch(ResourcesAppended(resources=tuple(resources)))
                track_resources_normalized(provider, code, len(resources))
                status = f"{len(resources)} resources" if resources else STATUS_NO_RESOURCES
                store.dispatch(ProgressUpdated(code, PROGRESS_COMPLETE, status, ProgressState.DONE))
            processed += 1

        warnings = tuple(str(w) for w in (response.get("errors") or []))
        for warning in warnings:
            logger.warning(f"Backend reported partial failure: {warning}")
        summary = f"completed: {processed} resource types processed"
        state = store.dispatch(RunCompleted(summary=summary, warnings=warnings))
        track_enumeration(provider, "completed", time.time() - started)
        logger.info(f"Enumeration for credential {credential.id} {summary}, {len(state.resources)} resources")
        return state

    def _normalize_type(
        self,
        code: str,
        credential: Credential,
        result: Dict[str, Any],
        defaults: NormalizerDefaults,
    ) -> List[Resource]:
        field = payload_field(code, credential.provider)
        if field is None:
            raise NormalizationError(f"Unknown resource type '{code}'", resource_type=code)
        resources = normalize_items(code, credential.provider, result.get(field), defaults, registry=self.registry)

        unique: List[Resource] = []
        seen = set()
        for resource in resources:
            if resource.key in seen:
                logger.debug(f"Dropping duplicate {code} resource {resource.id} in {resource.region}")
                continue
            seen.add(resource.key)
            unique.append(resource)
        return unique

    @contextmanager
    def _api_ticker(self, store: EnumerationStore) -> Iterator[None]:
        """Advance the ``api`` progress entry while the backend call is pending."""
        stop = threading.Event()
        thread = threading.Thread(
            target=self._tick_api,
            args=(store, stop),
            name="cloudscope-api-progress",
            daemon=True,
        )
        thread.start()
        try:
            yield
        finally:
            stop.set()
            thread.join()

    def _tick_api(self, store: EnumerationStore, stop: threading.Event) -> None:
        cap = self.settings.api_progress_cap
        step = self.settings.progress_tick_step
        while not stop.wait(self.settings.progress_tick_interval):
            entry = store.state.progress.get(API_PROGRESS_CODE)
            if entry is None or entry.percent >= cap:
                continue
            store.dispatch(
                ProgressUpdated(API_PROGRESS_CODE, min(entry.percent + step, cap), STATUS_WAITING, ProgressState.RUNNING)
            )
