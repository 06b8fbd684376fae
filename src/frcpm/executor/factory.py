"""Task factory.

Shortcuts for the kinds of background work the application runs: database
operations, data loads and saves, reports, batch jobs with progress and
periodic refreshes. Each ``run_*`` method submits immediately and returns
the executor's future.

Example:
    >>> from frcpm.executor.factory import TaskFactory
    >>> from frcpm.executor.sync import SyncExecutor
    >>> factory = TaskFactory(SyncExecutor())
    >>> factory.run_data_load(lambda: ["robot"]).result()
    ['robot']
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, TypeVar

from frcpm.core.exceptions import ConfigurationError
from frcpm.database.task import DatabaseOperation, DatabaseTask
from frcpm.executor.periodic import RepeatingTask
from frcpm.models.task import Task, TaskSnapshot
from frcpm.protocols.executor import Executor, FailureCallback, SuccessCallback
from frcpm.protocols.persistence import PersistenceProvider

T = TypeVar("T")


class BatchTask(Task[T]):
    """Task whose processor receives the task itself to report progress."""

    def __init__(self, name: str, processor: Callable[[Task[T]], T]) -> None:
        super().__init__(name)
        self._processor = processor

    def call(self) -> T:
        return self._processor(self)


class TaskFactory:
    """Builds and submits tasks through one executor.

    Args:
        executor: Executor running every task created here.
        provider: Persistence provider for database tasks.
    """

    def __init__(self, executor: Executor, provider: PersistenceProvider | None = None) -> None:
        self.executor = executor
        self.provider = provider

    def create_database_task(self, name: str, operation: DatabaseOperation[T]) -> DatabaseTask[T]:
        """Build (but do not submit) a transactional task.

        Raises:
            ConfigurationError: If the factory has no provider.
        """
        if self.provider is None:
            raise ConfigurationError("TaskFactory needs a persistence provider for database tasks")
        return DatabaseTask(name, operation, self.provider)

    def run_database(
        self,
        name: str,
        operation: DatabaseOperation[T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[T]:
        return self.executor.submit_task(self.create_database_task(name, operation), on_success, on_failure)

    def run_data_load(
        self,
        loader: Callable[[], T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "data-load",
    ) -> Future[T]:
        return self.executor.submit(loader, on_success, on_failure, name=name)

    def run_data_save(
        self,
        saver: Callable[[], T],
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "data-save",
    ) -> Future[T]:
        return self.executor.submit(saver, on_success, on_failure, name=name)

    def run_report(
        self,
        generator: Callable[[], T],
        on_complete: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "report",
    ) -> Future[T]:
        return self.executor.submit(generator, on_complete, on_failure, name=name)

    def run_batch(
        self,
        processor: Callable[[Task[T]], T],
        on_progress: Callable[[float], Any] | None = None,
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        *,
        name: str = "batch",
    ) -> Future[T]:
        """Run a batch job that reports its own progress.

        ``processor`` receives the running task and calls
        ``task.update_progress(done, total)``; ``on_progress`` gets the
        fraction done on the interactive thread.
        """
        task = BatchTask(name, processor)
        if on_progress is not None:

            def forward(snapshot: TaskSnapshot) -> None:
                on_progress(snapshot.fraction)

            task.add_listener(forward)
        return self.executor.submit_task(task, on_success, on_failure)

    def schedule_periodic(
        self,
        work: Callable[[], T],
        *,
        period: float,
        initial_delay: float = 0.0,
        on_result: SuccessCallback[T] | None = None,
        on_error: FailureCallback | None = None,
        name: str = "periodic",
    ) -> RepeatingTask[T]:
        """Start submitting ``work`` every ``period`` seconds."""
        return RepeatingTask(
            self.executor,
            work,
            period=period,
            initial_delay=initial_delay,
            on_result=on_result,
            on_error=on_error,
            name=name,
        ).start()
