"""Tests for the enumeration state machine and store."""

import pytest

from cloudscope.core.models import Resource
from cloudscope.enumeration.state import (
    EnumerationState,
    EnumerationStore,
    Phase,
    ProgressState,
    ProgressUpdated,
    ResourcesAppended,
    RunCancelled,
    RunCompleted,
    RunFailed,
    RunReset,
    RunStarted,
    initial_progress,
    reduce,
)


def _resource(rid="i-1", rtype="ec2"):
    return Resource(id=rid, name=rid, type=rtype, status="running", region="us-east-1")


def _started(selection=("ec2", "s3")):
    return reduce(EnumerationState(), RunStarted(credential_id=1, selection=selection))


class TestReduce:
    """Tests for the pure reducer."""

    def test_run_started_builds_progress(self):
        """Test the api entry comes first, then one pending entry per code."""
        state = _started()
        assert state.phase == Phase.RUNNING
        assert list(state.progress) == ["api", "ec2", "s3"]
        assert state.progress["api"].state == ProgressState.RUNNING
        assert state.progress["ec2"].state == ProgressState.PENDING
        assert state.progress["ec2"].percent == 0

    def test_percent_never_decreases(self):
        """Test a lower percent keeps the previous value."""
        state = reduce(_started(), ProgressUpdated("ec2", 40, "working"))
        state = reduce(state, ProgressUpdated("ec2", 10, "still working"))
        assert state.progress["ec2"].percent == 40
        assert state.progress["ec2"].status == "still working"

    def test_percent_clamped(self):
        """Test percent is bounded to 0..100."""
        state = reduce(_started(), ProgressUpdated("ec2", 250, "over"))
        assert state.progress["ec2"].percent == 100

    def test_terminal_entries_not_rewritten(self):
        """Test done entries ignore later updates."""
        state = reduce(_started(), ProgressUpdated("ec2", 100, "1 resources", ProgressState.DONE))
        after = reduce(state, ProgressUpdated("ec2", 50, "again", ProgressState.RUNNING))
        assert after is state

    def test_unknown_code_ignored(self):
        """Test updates for codes outside the run are no-ops."""
        state = _started()
        assert reduce(state, ProgressUpdated("rds", 50, "x")) is state

    def test_resources_appended_in_order(self):
        state = reduce(_started(), ResourcesAppended(resources=(_resource("i-1"),)))
        state = reduce(state, ResourcesAppended(resources=(_resource("b1", "s3"),)))
        assert [r.id for r in state.resources] == ["i-1", "b1"]

    def test_completed(self):
        state = reduce(_started(), RunCompleted(summary="completed: 2 resource types processed", warnings=("w",)))
        assert state.phase == Phase.COMPLETED
        assert state.warnings == ("w",)

    def test_failed_clears_progress_and_resources(self):
        """Test a failed run carries only the error."""
        state = reduce(_started(), ResourcesAppended(resources=(_resource(),)))
        state = reduce(state, RunFailed(error="Credential not found"))
        assert state.phase == Phase.FAILED
        assert state.progress == {}
        assert state.resources == ()
        assert state.error == "Credential not found"

    def test_cancelled_marks_pending_entries(self):
        """Test cancellation keeps terminal entries and cancels the rest."""
        state = reduce(_started(), ProgressUpdated("ec2", 100, "done", ProgressState.DONE))
        state = reduce(state, RunCancelled(summary="cancelled: 1 of 2 resource types processed"))
        assert state.phase == Phase.CANCELLED
        assert state.progress["ec2"].state == ProgressState.DONE
        assert state.progress["s3"].state == ProgressState.CANCELLED

    def test_reset(self):
        assert reduce(_started(), RunReset()) == EnumerationState()

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            reduce(EnumerationState(), object())

    def test_to_dict(self):
        """Test snapshots serialize to plain JSON types."""
        data = _started(("ec2",)).to_dict()
        assert data["phase"] == "running"
        assert data["selection"] == ["ec2"]
        assert data["progress"]["ec2"] == {"percent": 0, "status": "pending", "state": "pending"}

    def test_initial_progress_empty_selection(self):
        assert list(initial_progress(())) == ["api"]


class TestEnumerationStore:
    """Tests for EnumerationStore."""

    def test_subscribers_receive_each_transition(self):
        """Test subscribers see states and progress events in dispatch order."""
        store = EnumerationStore()
        seen = []
        store.subscribe(lambda state, event: seen.append((state.phase, event)))

        store.dispatch(RunStarted(credential_id=1, selection=("ec2",)))
        store.dispatch(ProgressUpdated("ec2", 30, "normalizing"))

        assert seen[0] == (Phase.RUNNING, None)
        assert seen[1][1].to_dict() == {"code": "ec2", "percent": 30, "status": "normalizing"}

    def test_progress_event_reports_clamped_percent(self):
        """Test the delivered event carries the stored percent."""
        store = EnumerationStore()
        events = []
        store.dispatch(RunStarted(credential_id=1, selection=("ec2",)))
        store.dispatch(ProgressUpdated("ec2", 60, "a"))
        store.subscribe(lambda state, event: events.append(event))

        store.dispatch(ProgressUpdated("ec2", 20, "b"))

        assert events[0].percent == 60

    def test_noop_dispatch_does_not_notify(self):
        store = EnumerationStore()
        calls = []
        store.subscribe(lambda state, event: calls.append(event))
        store.dispatch(ProgressUpdated("ec2", 10, "x"))
        assert calls == []

    def test_unsubscribe(self):
        """Test unsubscribed callbacks stop receiving events."""
        store = EnumerationStore()
        calls = []
        unsubscribe = store.subscribe(lambda state, event: calls.append(state.phase))
        store.dispatch(RunStarted(credential_id=1, selection=("ec2",)))
        unsubscribe()
        unsubscribe()
        store.dispatch(RunCompleted(summary="done"))
        assert calls == [Phase.RUNNING]

    def test_failing_subscriber_isolated(self):
        """Test one failing subscriber does not block the others."""
        store = EnumerationStore()
        calls = []

        def broken(state, event):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(lambda state, event: calls.append(state.phase))

        state = store.dispatch(RunStarted(credential_id=1, selection=("ec2",)))

        assert state.phase == Phase.RUNNING
        assert calls == [Phase.RUNNING]
