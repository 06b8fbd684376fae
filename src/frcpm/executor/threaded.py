"""Thread pool executor with interactive-thread delivery.

Work runs on a fixed-size pool of worker threads. Outcomes are marshalled
back onto the interactive thread, where exactly one of the success or
failure callbacks runs before the returned future is resolved.

Example:
    >>> from frcpm.dispatch.loop import InteractiveLoop
    >>> from frcpm.executor.threaded import TaskExecutor
    >>> loop = InteractiveLoop().start()
    >>> executor = TaskExecutor(loop, max_workers=2)
    >>> executor.submit(lambda: 6 * 7).result(timeout=5)
    42
    >>> executor.shutdown()
    >>> loop.stop()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Any, TypeVar

from frcpm.core.exceptions import (
    DispatcherClosedError,
    ExecutorShutdownError,
    TaskCancelledError,
    TaskStateError,
)
from frcpm.executor.delivery import deliver_failure, deliver_success, failed_future, new_future
from frcpm.models.task import Task, TaskSnapshot, TaskStatus
from frcpm.protocols.dispatcher import InteractiveDispatcher
from frcpm.protocols.executor import FailureCallback, SuccessCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


class TaskExecutor:
    """Fixed-size worker pool delivering results on the interactive thread.

    Submission never blocks: tasks beyond the pool size wait in the pool's
    queue. Completion order between tasks is not defined, and callbacks are
    delivered in completion order.

    Args:
        dispatcher: Owner of the interactive thread.
        max_workers: Worker pool size.
        name: Prefix for worker thread names.
    """

    def __init__(
        self,
        dispatcher: InteractiveDispatcher,
        max_workers: int = DEFAULT_WORKERS,
        name: str = "frcpm-worker",
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.name = name
        self.max_workers = max_workers
        self._dispatcher = dispatcher
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._in_flight: dict[str, Task[Any]] = {}
        self._shutdown = False

    def __enter__(self) -> TaskExecutor:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()

    @property
    def dispatcher(self) -> InteractiveDispatcher:
        return self._dispatcher

    @property
    def is_shutdown(self) -> bool:
        with self._lock:
            return self._shutdown

    def active_tasks(self) -> list[TaskSnapshot]:
        """Snapshots of tasks accepted but not yet delivered."""
        with self._lock:
            tasks = list(self._in_flight.values())
        return [task.snapshot() for task in tasks]

    # --- Submission ---

    def submit(
        self,
        work: Callable[[], T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "task",
    ) -> Future[T]:
        """Run ``work`` on a worker thread.

        Args:
            work: No-argument callable producing the result.
            on_success: Called with the result on the interactive thread.
            on_failure: Called with the raised error on the interactive thread.
            name: Task name for logs.

        Returns:
            Future resolved after the callback has run. It fails with the
            work's error, or with the callback's error if the callback raised.

        Raises:
            ExecutorShutdownError: If :meth:`shutdown` was called.
        """
        return self.submit_task(Task(name, work), on_success, on_failure)

    def submit_task(
        self,
        task: Task[T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[T]:
        """Run a pre-built task so its progress can be observed.

        Listeners on ``task`` are notified on the interactive thread.
        """
        future: Future[T] = new_future()
        with self._lock:
            if self._shutdown:
                raise ExecutorShutdownError(
                    f"Executor {self.name!r} is shut down; rejected task {task.name!r}"
                )
            if task.id in self._in_flight or task.status is not TaskStatus.PENDING:
                raise TaskStateError(f"Task {task.name!r} was already submitted")
            task.bind_dispatcher(self._dispatcher.call_soon)
            self._in_flight[task.id] = task
            self._pool.submit(self._execute, task, on_success, on_failure, future)
        logger.debug("Submitted task %r", task.name)
        return future

    def run_on_interactive_thread(self, work: Callable[[], T]) -> Future[T]:
        """Run ``work`` on the interactive thread.

        Do not block on the returned future from the interactive thread
        itself: the work cannot run until the current callback returns.

        If the dispatcher is closed the returned future has already failed
        with ``DispatcherClosedError``.
        """
        future: Future[T] = new_future()

        def invoke() -> None:
            try:
                result = work()
            except BaseException as exc:
                logger.exception("Error in interactive-thread work")
                future.set_exception(exc)
            else:
                future.set_result(result)

        try:
            self._dispatcher.call_soon(invoke)
        except DispatcherClosedError as exc:
            logger.error("Cannot run interactive-thread work: %s", exc)
            return failed_future(exc)
        return future

    # --- Worker side ---

    def _execute(
        self,
        task: Task[T],
        on_success: SuccessCallback[T] | None,
        on_failure: FailureCallback | None,
        future: Future[T],
    ) -> None:
        try:
            result = task.run()
        except TaskCancelledError as exc:
            logger.debug("Task %r cancelled before it started", task.name)
            self._deliver(partial(deliver_failure, task, exc, on_failure, future), task, future)
        except BaseException as exc:
            # The pool drops anything raised here.
            logger.error("Error executing task %r", task.name, exc_info=exc)
            self._deliver(partial(deliver_failure, task, exc, on_failure, future), task, future)
        else:
            self._deliver(partial(deliver_success, task, result, on_success, future), task, future)

    def _deliver(self, delivery: Callable[[], None], task: Task[T], future: Future[T]) -> None:
        def on_interactive_thread() -> None:
            try:
                delivery()
            finally:
                self._forget(task)

        try:
            self._dispatcher.call_soon(on_interactive_thread)
        except DispatcherClosedError as exc:
            logger.error("Cannot deliver outcome of task %r: %s", task.name, exc)
            self._forget(task)
            future.set_exception(exc)

    def _forget(self, task: Task[Any]) -> None:
        with self._lock:
            self._in_flight.pop(task.id, None)

    # --- Lifecycle ---

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting new work.

        Tasks already running finish normally. Idempotent.

        Args:
            wait: Block until the workers have exited.
            cancel_pending: Cancel accepted tasks that have not started; their
                failure callbacks receive ``TaskCancelledError``.
        """
        with self._lock:
            first = not self._shutdown
            self._shutdown = True
            pending = list(self._in_flight.values()) if cancel_pending else []
        if first:
            logger.info("Shutting down executor %r", self.name)
        for task in pending:
            if task.cancel():
                logger.debug("Cancelled pending task %r", task.name)
        self._pool.shutdown(wait=wait)
