"""Utilities for running background tasks."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from contextvars import copy_context
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Tuple

import structlog
from structlog.contextvars import bind_contextvars, get_contextvars

_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="bridge-bg")


def run_async(
    func: Callable[..., Any],
    /,
    *args: Any,
    trace_id: str | None = None,
    **kwargs: Any,
) -> Future:
    """Submit *func* to the shared thread pool and return a Future."""

    context = copy_context()

    if trace_id is not None:
        existing_trace = context.run(lambda: get_contextvars().get("trace_id"))

        if existing_trace != trace_id:
            context.run(lambda: bind_contextvars(trace_id=trace_id))

    def runner() -> Any:
        return context.run(func, *args, **kwargs)

    return _executor.submit(runner)


@dataclass(frozen=True)
class PendingTask:
    """A background operation whose result is no longer awaited by anyone."""

    correlation_id: str
    operation: str
    future: Future
    registered_at: float

    @property
    def done(self) -> bool:
        return self.future.done()


class BackgroundTaskRegistry:
    """Short-lived registry of detached operations keyed by correlation ID.

    Results are not delivered anywhere from here; entries can be looked up or
    cancelled until they expire after *ttl*.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(minutes=15),
        timer: Callable[[], float] | None = None,
    ) -> None:
        if ttl.total_seconds() <= 0:
            raise ValueError("Registry ttl must be greater than zero seconds.")

        self._ttl = ttl.total_seconds()
        self._timer = timer or time.monotonic
        self._lock = threading.Lock()
        self._entries: Dict[str, PendingTask] = {}

    def register(self, correlation_id: str, future: Future, *, operation: str) -> PendingTask:
        """Track *future* under *correlation_id* and log its eventual outcome."""

        entry = PendingTask(
            correlation_id=correlation_id,
            operation=operation,
            future=future,
            registered_at=self._timer(),
        )

        with self._lock:
            self._prune_locked()
            self._entries[correlation_id] = entry

        future.add_done_callback(lambda finished: _log_outcome(entry, finished))
        return entry

    def get(self, correlation_id: str) -> PendingTask | None:
        with self._lock:
            self._prune_locked()
            return self._entries.get(correlation_id)

    def cancel(self, correlation_id: str) -> bool:
        """Cancel a pending task if it has not started yet.

        Returns True when the underlying future was cancelled. Work that is
        already running cannot be interrupted and keeps running.
        """

        with self._lock:
            entry = self._entries.get(correlation_id)
        if entry is None:
            return False
        return entry.future.cancel()

    def __len__(self) -> int:
        with self._lock:
            self._prune_locked()
            return len(self._entries)

    def _prune_locked(self) -> None:
        now = self._timer()
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.registered_at >= self._ttl
        ]
        for key in expired:
            self._entries.pop(key, None)


def _log_outcome(entry: PendingTask, future: Future) -> None:
    log = structlog.get_logger().bind(
        correlation_id=entry.correlation_id,
        operation=entry.operation,
    )

    if future.cancelled():
        log.info("background_task_cancelled")
        return

    error = future.exception()
    if error is not None:
        log.error("background_task_failed", error=str(error), error_type=type(error).__name__)
        return

    log.info("background_task_completed")


def race(
    func: Callable[[], Any],
    *,
    timeout: float | None,
    correlation_id: str,
    operation: str,
    registry: BackgroundTaskRegistry,
) -> Tuple[bool, Any]:
    """Run *func* in the background and wait at most *timeout* seconds.

    Returns ``(True, result)`` when the operation finished in time. When the
    timeout wins, the still-running future is handed to *registry* and
    ``(False, None)`` is returned; the operation is not restarted. A *timeout*
    of None waits for completion. Exceptions raised by *func* before the
    deadline propagate to the caller.
    """

    future = run_async(func, trace_id=correlation_id)

    try:
        return True, future.result(timeout=timeout)
    except FuturesTimeoutError:
        if future.done():
            # Finished at the deadline, or raised TimeoutError itself.
            return True, future.result()
        registry.register(correlation_id, future, operation=operation)
        return False, None


PENDING_TASKS = BackgroundTaskRegistry()
