"""Executor protocol.

Defines the interface for background executors (threaded, synchronous).

Example:
    >>> from frcpm.protocols.executor import Executor
    >>> # Executor is a Protocol - check interface
    >>> hasattr(Executor, "submit")
    True
    >>> hasattr(Executor, "run_on_interactive_thread")
    True
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from frcpm.models.task import Task

T = TypeVar("T")

SuccessCallback = Callable[[T], object]
FailureCallback = Callable[[BaseException], object]


@runtime_checkable
class Executor(Protocol):
    """Executor protocol for running work off the interactive thread.

    Implementations: TaskExecutor (thread pool), SyncExecutor (inline).
    """

    def submit(
        self,
        work: Callable[[], T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "task",
    ) -> Future[T]:
        """Run ``work`` in the background and deliver its outcome."""
        ...

    def submit_task(
        self,
        task: Task[T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[T]:
        """Run a pre-built task so its progress can be observed."""
        ...

    def run_on_interactive_thread(self, work: Callable[[], T]) -> Future[T]:
        """Run ``work`` on the interactive thread itself.

        Failures, including a closed dispatcher, arrive on the returned future.
        """
        ...

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting new work."""
        ...
