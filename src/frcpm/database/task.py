"""Transactional background tasks.

A DatabaseTask wraps an operation in a transaction on its own handle:
acquire, begin, run, commit. Any failure after the transaction began gets
one rollback attempt; the handle is released exactly once on every path.

Example:
    >>> from frcpm.database.task import DatabaseStage
    >>> [stage.progress for stage in DatabaseStage]
    [0, 20, 40, 80, 100]
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from frcpm.core.exceptions import HandleAcquisitionError
from frcpm.models.task import Task
from frcpm.protocols.persistence import PersistenceProvider, TransactionalHandle

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DatabaseStage(str, Enum):
    """Progress milestones of a database task, out of 100."""

    STARTED = "started"
    CONNECTED = "connected"
    EXECUTING = "executing"
    COMMITTING = "committing"
    DONE = "done"

    @property
    def progress(self) -> int:
        return _STAGE_PROGRESS[self]


_STAGE_PROGRESS = {
    DatabaseStage.STARTED: 0,
    DatabaseStage.CONNECTED: 20,
    DatabaseStage.EXECUTING: 40,
    DatabaseStage.COMMITTING: 80,
    DatabaseStage.DONE: 100,
}

DatabaseOperation = Callable[[Any], T]


class DatabaseTask(Task[T]):
    """Task running ``operation(handle)`` inside a transaction.

    Args:
        name: Task name, also used in progress messages.
        operation: Callable receiving the transactional handle.
        provider: Source of handles; each run acquires its own.

    Example:
        >>> from frcpm.database.task import DatabaseTask
        >>> class Handle:
        ...     def begin(self): pass
        ...     def commit(self): pass
        ...     def rollback(self): pass
        ...     def release(self): pass
        >>> class Provider:
        ...     def acquire_handle(self): return Handle()
        >>> DatabaseTask("count", lambda handle: 3, Provider()).run()
        3
    """

    def __init__(
        self,
        name: str,
        operation: DatabaseOperation[T],
        provider: PersistenceProvider,
    ) -> None:
        super().__init__(name)
        self._operation = operation
        self._provider = provider

    def call(self) -> T:
        self._report(DatabaseStage.STARTED, f"Starting {self.name}")
        handle = self._acquire()
        began = False
        try:
            self._report(DatabaseStage.CONNECTED, "Connected to database")
            handle.begin()
            began = True
            self._report(DatabaseStage.EXECUTING, f"Executing {self.name}")
            result = self._operation(handle)
            self._report(DatabaseStage.COMMITTING, "Committing transaction")
            handle.commit()
        except BaseException:
            if began:
                self._rollback(handle)
            raise
        finally:
            self._release(handle)
        self._report(DatabaseStage.DONE, f"Completed {self.name}")
        return result

    def _report(self, stage: DatabaseStage, message: str) -> None:
        self.update_progress(stage.progress, 100, message)

    def _acquire(self) -> TransactionalHandle:
        try:
            return self._provider.acquire_handle()
        except HandleAcquisitionError:
            raise
        except Exception as exc:
            raise HandleAcquisitionError(
                f"Could not acquire a database handle for {self.name!r}: {exc}"
            ) from exc

    def _rollback(self, handle: TransactionalHandle) -> None:
        try:
            handle.rollback()
        except Exception:
            logger.exception("Error rolling back transaction for %r", self.name)

    def _release(self, handle: TransactionalHandle) -> None:
        try:
            handle.release()
        except Exception:
            logger.exception("Error releasing database handle for %r", self.name)
