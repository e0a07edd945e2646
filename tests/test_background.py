"""Tests for background task utilities."""

from __future__ import annotations

from concurrent.futures import Future
from datetime import timedelta
from pathlib import Path
import sys
import threading

import pytest
import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars
from structlog.testing import capture_logs

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clickup_discord_bridge.background import BackgroundTaskRegistry, race, run_async  # noqa: E402


def test_run_async_propagates_structlog_context():
    """Trace IDs bound in the caller should be visible within the worker thread."""

    clear_contextvars()
    bind_contextvars(trace_id="trace-123")
    captured: dict[str, str] = {}

    future = run_async(lambda: captured.update(get_contextvars()))
    future.result(timeout=1)

    assert captured.get("trace_id") == "trace-123"

    clear_contextvars()


def test_run_async_accepts_explicit_trace_id():
    """A trace_id parameter should seed context for workers even if not bound in caller."""

    clear_contextvars()
    captured: dict[str, str] = {}

    future = run_async(lambda: captured.update(get_contextvars()), trace_id="trace-456")
    future.result(timeout=1)

    assert captured.get("trace_id") == "trace-456"

    clear_contextvars()


def test_run_async_preserves_trace_id_in_background_logs():
    """Structured log events from workers should include the propagated trace identifier."""

    clear_contextvars()

    with capture_logs(processors=[structlog.contextvars.merge_contextvars]) as logs:
        future = run_async(lambda: structlog.get_logger().info("background_event"), trace_id="trace-789")
        future.result(timeout=1)

    assert logs, "expected background_event log to be captured"
    event = logs[0]
    assert event.get("event") == "background_event"
    assert event.get("trace_id") == "trace-789"

    clear_contextvars()


class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_registry_tracks_and_expires_entries():
    timer = FakeTimer()
    registry = BackgroundTaskRegistry(ttl=timedelta(seconds=30), timer=timer)
    future: Future = Future()

    entry = registry.register("corr-1", future, operation="task.create")

    assert registry.get("corr-1") is entry
    assert entry.operation == "task.create"
    assert not entry.done
    assert len(registry) == 1

    timer.now = 31.0
    assert registry.get("corr-1") is None
    assert len(registry) == 0


def test_registry_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        BackgroundTaskRegistry(ttl=timedelta(0))


def test_registry_cancel_only_affects_pending_futures():
    registry = BackgroundTaskRegistry()
    pending: Future = Future()
    registry.register("corr-1", pending, operation="task.create")

    assert registry.cancel("corr-1") is True
    assert pending.cancelled()
    assert registry.cancel("missing") is False


@pytest.mark.parametrize(
    "settle, expected_event",
    [
        (lambda future: future.set_result({"id": "t1"}), "background_task_completed"),
        (lambda future: future.set_exception(RuntimeError("boom")), "background_task_failed"),
    ],
)
def test_registry_logs_outcome_when_future_settles(settle, expected_event):
    registry = BackgroundTaskRegistry()
    future: Future = Future()
    registry.register("corr-1", future, operation="task.create")

    with capture_logs() as logs:
        settle(future)

    assert logs[-1]["event"] == expected_event
    assert logs[-1]["correlation_id"] == "corr-1"
    assert logs[-1]["operation"] == "task.create"


def test_race_returns_result_when_fast():
    registry = BackgroundTaskRegistry()

    finished, result = race(
        lambda: "done",
        timeout=1.0,
        correlation_id="corr-1",
        operation="task.create",
        registry=registry,
    )

    assert (finished, result) == (True, "done")
    assert len(registry) == 0


def test_race_hands_slow_work_to_registry_without_restarting_it():
    registry = BackgroundTaskRegistry()
    gate = threading.Event()
    calls = []

    def slow():
        calls.append(1)
        gate.wait(timeout=5)
        return "created"

    finished, result = race(
        slow,
        timeout=0.05,
        correlation_id="corr-2",
        operation="task.create",
        registry=registry,
    )

    assert (finished, result) == (False, None)
    entry = registry.get("corr-2")
    assert entry is not None

    gate.set()
    assert entry.future.result(timeout=5) == "created"
    assert calls == [1]


def test_race_propagates_errors_raised_before_deadline():
    def failing():
        raise LookupError("missing list")

    with pytest.raises(LookupError):
        race(
            failing,
            timeout=1.0,
            correlation_id="corr-3",
            operation="task.create",
            registry=BackgroundTaskRegistry(),
        )
