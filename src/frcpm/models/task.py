"""Task models for background execution.

A Task is a unit of deferred work: a name, a no-argument work function and
thread-safe state (status, progress, message, result or error). Tasks are
created by the caller, mutated only by the worker running them, and observed
from anywhere through snapshots.

Example:
    >>> from frcpm.models.task import Task, TaskStatus
    >>> task = Task(name="answer", work=lambda: 42)
    >>> task.status.value
    'pending'
    >>> task.run()
    42
    >>> task.status is TaskStatus.SUCCEEDED
    True
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import Generic, TypeVar
from uuid import uuid4

from pydantic import ConfigDict, Field

from frcpm.core.exceptions import DispatcherClosedError, TaskCancelledError, TaskStateError
from frcpm.models.base import FrcpmModel

T = TypeVar("T")

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Task execution states.

    Example:
        >>> from frcpm.models.task import TaskStatus
        >>> TaskStatus.PENDING.value
        'pending'
        >>> TaskStatus.FAILED.is_terminal
        True
    """

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True once no further transition is possible."""
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELLED)


class TaskSnapshot(FrcpmModel):
    """Immutable view of a task's observable state.

    Example:
        >>> from frcpm.models.task import TaskSnapshot, TaskStatus
        >>> s = TaskSnapshot(id="t1", name="load", status=TaskStatus.RUNNING, current=1, total=4)
        >>> s.fraction
        0.25
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Task identifier")
    name: str = Field(..., description="Task name")
    status: TaskStatus
    current: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)
    message: str = Field(default="")

    @property
    def fraction(self) -> float:
        """Progress as a fraction between 0 and 1."""
        if self.total <= 0:
            return 0.0
        return min(1.0, self.current / self.total)

    @property
    def percent(self) -> float:
        """Progress as a percentage (0-100)."""
        return self.fraction * 100


TaskListener = Callable[[TaskSnapshot], None]


class Task(Generic[T]):
    """A named unit of deferred work with observable progress.

    Subclasses may override :meth:`call` instead of passing ``work``.

    Args:
        name: Human readable name, used in logs and snapshots.
        work: No-argument callable producing the result.
    """

    def __init__(self, name: str, work: Callable[[], T] | None = None) -> None:
        self.id = str(uuid4())
        self.name = name
        self._work = work
        self._lock = threading.Lock()
        self._status = TaskStatus.PENDING
        self._current = 0.0
        self._total = 0.0
        self._message = ""
        self._result: T | None = None
        self._error: BaseException | None = None
        self._runner: int | None = None
        self._listeners: list[TaskListener] = []
        self._dispatch: Callable[[Callable[[], None]], None] | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self.status.value}>"

    # --- Read accessors (any thread) ---

    @property
    def status(self) -> TaskStatus:
        with self._lock:
            return self._status

    @property
    def progress(self) -> tuple[float, float]:
        """Current and total progress units."""
        with self._lock:
            return self._current, self._total

    @property
    def message(self) -> str:
        with self._lock:
            return self._message

    @property
    def result(self) -> T | None:
        """Produced value; only set once the task SUCCEEDED."""
        with self._lock:
            return self._result

    @property
    def error(self) -> BaseException | None:
        """Raised error; only set once the task FAILED."""
        with self._lock:
            return self._error

    @property
    def done(self) -> bool:
        return self.status.is_terminal

    def snapshot(self) -> TaskSnapshot:
        """Capture the current observable state."""
        with self._lock:
            return TaskSnapshot(
                id=self.id,
                name=self.name,
                status=self._status,
                current=self._current,
                total=self._total,
                message=self._message,
            )

    # --- Mutators (executing thread only) ---

    def update_progress(self, current: float, total: float, message: str | None = None) -> None:
        """Report progress as ``current`` out of ``total`` units.

        Args:
            current: Units done, clamped to ``[0, total]``.
            total: Units expected.
            message: Optional status message set in the same update.

        Raises:
            TaskStateError: If called from a thread not running this task.
        """
        with self._lock:
            self._check_runner()
            self._total = max(0.0, float(total))
            self._current = max(0.0, min(float(current), self._total))
            if message is not None:
                self._message = message
        self._publish()

    def update_message(self, message: str) -> None:
        """Report a human readable status message.

        Raises:
            TaskStateError: If called from a thread not running this task.
        """
        with self._lock:
            self._check_runner()
            self._message = message
        self._publish()

    def _check_runner(self) -> None:
        if self._runner != threading.get_ident():
            raise TaskStateError(
                f"Task {self.name!r} can only be updated from the thread executing it"
            )

    # --- Lifecycle ---

    def call(self) -> T:
        """Produce the result. Runs on the executing thread."""
        if self._work is None:
            raise NotImplementedError(f"Task {self.name!r} has no work function")
        return self._work()

    def run(self) -> T:
        """Execute the work on the current thread.

        Returns:
            The produced result.

        Raises:
            TaskCancelledError: If the task was cancelled before starting.
            TaskStateError: If the task already ran.
            BaseException: Whatever the work raised, after recording it.
        """
        with self._lock:
            if self._status is TaskStatus.CANCELLED:
                raise TaskCancelledError(f"Task {self.name!r} was cancelled")
            if self._status is not TaskStatus.PENDING:
                raise TaskStateError(f"Task {self.name!r} is already {self._status.value}")
            self._status = TaskStatus.RUNNING
            self._runner = threading.get_ident()
        self._publish()

        try:
            result = self.call()
        except BaseException as exc:
            self._finish(TaskStatus.FAILED, error=exc)
            raise
        self._finish(TaskStatus.SUCCEEDED, result=result)
        return result

    def cancel(self) -> bool:
        """Cancel the task if it has not started.

        Returns:
            True if the task moved to CANCELLED.
        """
        with self._lock:
            if self._status is not TaskStatus.PENDING:
                return False
            self._status = TaskStatus.CANCELLED
        self._publish()
        return True

    def _finish(
        self,
        status: TaskStatus,
        result: T | None = None,
        error: BaseException | None = None,
    ) -> None:
        with self._lock:
            if self._status.is_terminal:
                raise TaskStateError(f"Task {self.name!r} is already {self._status.value}")
            self._status = status
            self._result = result
            self._error = error
            self._runner = None
        self._publish()

    # --- Subscription ---

    def add_listener(self, listener: TaskListener) -> None:
        """Receive a snapshot whenever status, progress or message change."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TaskListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def bind_dispatcher(self, dispatch: Callable[[Callable[[], None]], None] | None) -> None:
        """Route listener notifications through ``dispatch``.

        Executors bind their interactive dispatcher here so listeners run on
        the interactive thread.
        """
        with self._lock:
            self._dispatch = dispatch

    def _publish(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            dispatch = self._dispatch
        if not listeners:
            return
        snapshot = self.snapshot()
        for listener in listeners:
            if dispatch is None:
                try:
                    listener(snapshot)
                except Exception:
                    logger.exception("Error in listener for task %r", self.name)
                continue
            try:
                dispatch(partial(listener, snapshot))
            except DispatcherClosedError:
                logger.debug("Dropped progress update for task %r: dispatcher closed", self.name)
