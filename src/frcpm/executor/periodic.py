"""Repeating background work.

A timer thread submits the same work function to an executor on a fixed
period. Runs never overlap: a tick that arrives while the previous run is
still in flight is skipped.

Example:
    >>> from frcpm.executor.periodic import RepeatingTask
    >>> from frcpm.executor.sync import SyncExecutor
    >>> ticks = []
    >>> job = RepeatingTask(SyncExecutor(), lambda: "tick", period=0.01, on_result=ticks.append).start()
    >>> import time; time.sleep(0.05); job.cancel()
    >>> len(ticks) > 0
    True
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Generic, TypeVar

from frcpm.core.exceptions import ExecutorShutdownError
from frcpm.protocols.executor import Executor, FailureCallback, SuccessCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RepeatingTask(Generic[T]):
    """Submit ``work`` every ``period`` seconds until cancelled.

    Args:
        executor: Executor that runs each tick.
        work: No-argument callable run on each tick.
        period: Seconds between ticks.
        initial_delay: Seconds before the first tick.
        on_result: Called with each result on the interactive thread.
        on_error: Called with each error on the interactive thread.
        name: Name used for the timer thread and submitted tasks.
    """

    def __init__(
        self,
        executor: Executor,
        work: Callable[[], T],
        *,
        period: float,
        initial_delay: float = 0.0,
        on_result: SuccessCallback[T] | None = None,
        on_error: FailureCallback | None = None,
        name: str = "repeating",
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        if initial_delay < 0:
            raise ValueError("initial_delay cannot be negative")
        self.name = name
        self._executor = executor
        self._work = work
        self._period = period
        self._initial_delay = initial_delay
        self._on_result = on_result
        self._on_error = on_error
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._in_flight = False
        self._thread = threading.Thread(target=self._loop, name=f"{name}-timer", daemon=True)
        self.run_count = 0
        self.consecutive_failures = 0
        self.skipped = 0

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> RepeatingTask[T]:
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop scheduling further ticks. A run in flight still completes."""
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _loop(self) -> None:
        delay = self._initial_delay
        while not self._cancelled.wait(delay):
            self._tick()
            delay = self._period

    def _tick(self) -> None:
        with self._lock:
            if self._in_flight:
                self.skipped += 1
                logger.debug("Skipping tick of %r: previous run still in flight", self.name)
                return
            self._in_flight = True
        try:
            future = self._executor.submit(self._work, self._handle_result, self._handle_error, name=self.name)
        except ExecutorShutdownError:
            logger.info("Executor shut down; stopping repeating task %r", self.name)
            with self._lock:
                self._in_flight = False
            self._cancelled.set()
            return
        # Resolves even when no callback could be delivered.
        future.add_done_callback(self._clear_in_flight)

    def _clear_in_flight(self, future: Future[T]) -> None:
        with self._lock:
            self._in_flight = False

    def _handle_result(self, result: T) -> None:
        with self._lock:
            self.run_count += 1
            self.consecutive_failures = 0
        if self._on_result is not None:
            self._on_result(result)

    def _handle_error(self, error: BaseException) -> None:
        with self._lock:
            self.run_count += 1
            self.consecutive_failures += 1
        if self._on_error is not None:
            self._on_error(error)
        else:
            logger.warning("Repeating task %r failed: %s", self.name, error)
