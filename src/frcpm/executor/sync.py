"""Synchronous executor implementation.

Runs work directly on the calling thread, which also plays the part of
the interactive thread. Same contract as TaskExecutor, minus the threads.

Best for: Testing, scripts, the CLI.

Example:
    >>> from frcpm.executor.sync import SyncExecutor
    >>> executor = SyncExecutor()
    >>> seen = []
    >>> future = executor.submit(lambda: 5 * 2, seen.append)
    >>> seen, future.result()
    ([10], 10)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar

from frcpm.core.exceptions import ExecutorShutdownError, TaskCancelledError
from frcpm.executor.delivery import deliver_failure, deliver_success, new_future
from frcpm.models.task import Task
from frcpm.protocols.executor import FailureCallback, SuccessCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)


class SyncExecutor:
    """Inline executor.

    The returned future is always resolved by the time ``submit`` returns.

    Example:
        >>> from frcpm.executor.sync import SyncExecutor
        >>> from frcpm.models.task import Task
        >>> executor = SyncExecutor()
        >>> task = Task(name="double", work=lambda: 21 * 2)
        >>> executor.submit_task(task).result()
        42
        >>> task.status.value
        'succeeded'
    """

    def __init__(self, name: str = "sync") -> None:
        """Initialize the executor.

        Args:
            name: Executor name for logging.
        """
        self.name = name
        self._shutdown = False

    def __enter__(self) -> SyncExecutor:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(
        self,
        work: Callable[[], T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "task",
    ) -> Future[T]:
        """Run ``work`` now and deliver its outcome.

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
        if self._shutdown:
            raise ExecutorShutdownError(f"Executor {self.name!r} is shut down; rejected task {task.name!r}")

        future: Future[T] = new_future()
        try:
            result = task.run()
        except TaskCancelledError as exc:
            deliver_failure(task, exc, on_failure, future)
        except BaseException as exc:
            logger.error("Error executing task %r", task.name, exc_info=exc)
            deliver_failure(task, exc, on_failure, future)
            if isinstance(exc, (KeyboardInterrupt, SystemExit)):
                raise
        else:
            deliver_success(task, result, on_success, future)
        return future

    def run_on_interactive_thread(self, work: Callable[[], T]) -> Future[T]:
        future: Future[T] = new_future()
        try:
            future.set_result(work())
        except Exception as exc:
            logger.exception("Error in interactive-thread work")
            future.set_exception(exc)
        return future

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting work. Nothing is ever pending, so arguments are ignored."""
        self._shutdown = True
