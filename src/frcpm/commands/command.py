"""Command adapters.

A command wraps background work for a UI control: it exposes whether the
control should be enabled (``executable``), whether work is in flight
(``running``) and how far along it is (``progress``). Executable is false
from the moment ``execute()`` starts until the completion callback has
finished, and whenever the optional external ``loading`` flag is set.

Example:
    >>> from frcpm.commands.command import AsyncCommand
    >>> from frcpm.executor.sync import SyncExecutor
    >>> results = []
    >>> command = AsyncCommand(lambda: "saved", SyncExecutor(), on_success=results.append)
    >>> command.execute().result()
    'saved'
    >>> results, command.running, command.executable
    (['saved'], False, True)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Future
from functools import partial
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from frcpm.commands.properties import BooleanProperty, DoubleProperty
from frcpm.core.exceptions import DispatcherClosedError
from frcpm.executor.delivery import failed_future, new_future
from frcpm.models.task import Task, TaskSnapshot
from frcpm.protocols.dispatcher import InteractiveDispatcher
from frcpm.protocols.executor import Executor, FailureCallback, SuccessCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)


@runtime_checkable
class Command(Protocol):
    """What a UI control needs from a command."""

    def execute(self) -> Future[Any] | None: ...

    def is_executable(self) -> bool: ...

    def is_running(self) -> bool: ...


class _Completion:
    """One execution; the first claim wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claimed = False

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True


class _BaseCommand(Generic[T]):
    def __init__(
        self,
        name: str,
        on_success: SuccessCallback[T] | None,
        on_failure: FailureCallback | None,
        loading: BooleanProperty | None,
    ) -> None:
        self.name = name
        self._on_success = on_success
        self._on_failure = on_failure
        self._lock = threading.RLock()
        self._running_property = BooleanProperty(False)
        self._executable_property = BooleanProperty(True)
        self._progress_property = DoubleProperty(0.0)
        self._loading = loading
        self._running_property.add_listener(self._refresh_executable)
        if loading is not None:
            loading.add_listener(self._refresh_executable)
        self._refresh_executable()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, running={self.running}, executable={self.executable})"

    # --- State ---

    @property
    def running(self) -> bool:
        return self._running_property.get()

    @property
    def executable(self) -> bool:
        return self._executable_property.get()

    @property
    def progress(self) -> float:
        return self._progress_property.get()

    @property
    def running_property(self) -> BooleanProperty:
        return self._running_property

    @property
    def executable_property(self) -> BooleanProperty:
        return self._executable_property

    @property
    def progress_property(self) -> DoubleProperty:
        return self._progress_property

    def is_running(self) -> bool:
        return self.running

    def is_executable(self) -> bool:
        return self.executable

    def _refresh_executable(self, *_: object) -> None:
        loading = self._loading.get() if self._loading is not None else False
        with self._lock:
            self._executable_property.set(not self._running_property.get() and not loading)

    # --- Execution ---

    def execute(self) -> Future[T] | None:
        """Start the work if the command is executable.

        Returns:
            A future resolved after the completion callback has run, or
            None when the command was not executable.
        """
        with self._lock:
            if not self.executable:
                logger.debug("Command %r not executable; ignoring execute()", self.name)
                return None
            self._progress_property.set(0.0)
            self._running_property.set(True)
        return self._start(_Completion())

    def _start(self, completion: _Completion) -> Future[T]:
        raise NotImplementedError

    def _succeeded(self, completion: _Completion, result: T) -> None:
        if not completion.claim():
            return
        try:
            self._progress_property.set(1.0)
            if self._on_success is not None:
                self._on_success(result)
        finally:
            self._finish()

    def _failed(self, completion: _Completion, error: BaseException) -> None:
        if not completion.claim():
            return
        try:
            if self._on_failure is not None:
                self._on_failure(error)
            else:
                logger.error("Command %r failed: %s", self.name, error, exc_info=error)
        finally:
            self._finish()

    def _finish(self) -> None:
        with self._lock:
            self._running_property.set(False)


class AsyncCommand(_BaseCommand[T]):
    """Runs a no-argument action on an executor.

    Progress follows the submitted task's progress updates and is set to
    1.0 on success.

    Args:
        action: Work to run on a worker thread.
        executor: Executor running the action.
        on_success: Called with the result on the interactive thread.
        on_failure: Called with the error on the interactive thread;
            failures are logged when omitted. A submission the executor
            rejects is reported the same way.
        loading: External flag that also disables the command.
        name: Name used for the task and in logs.
    """

    def __init__(
        self,
        action: Callable[[], T],
        executor: Executor,
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        loading: BooleanProperty | None = None,
        name: str = "command",
    ) -> None:
        self._action = action
        self._executor = executor
        super().__init__(name, on_success, on_failure, loading)

    def _start(self, completion: _Completion) -> Future[T]:
        task: Task[T] = Task(self.name, self._action)
        task.add_listener(self._track_progress)
        try:
            return self._executor.submit_task(
                task,
                partial(self._succeeded, completion),
                partial(self._failed, completion),
            )
        except Exception as exc:
            logger.warning("Command %r was rejected by its executor: %s", self.name, exc)
            result: Future[T] = new_future()
            reported = self._executor.run_on_interactive_thread(partial(self._failed, completion, exc))
            reported.add_done_callback(partial(self._rejected, completion, result, exc))
            return result

    def _rejected(
        self,
        completion: _Completion,
        result: Future[T],
        error: BaseException,
        reported: Future[None],
    ) -> None:
        failure = reported.exception()
        if isinstance(failure, DispatcherClosedError) and completion.claim():
            logger.warning("Command %r could not report its failure: %s", self.name, failure)
            self._finish()
        result.set_exception(failure or error)

    def _track_progress(self, snapshot: TaskSnapshot) -> None:
        if snapshot.total > 0:
            self._progress_property.set(snapshot.fraction)


class FutureCommand(_BaseCommand[T]):
    """Wraps an operation that already returns a future.

    The operation's completion is marshalled through ``dispatcher`` so the
    callbacks run on the interactive thread. An operation that raises
    instead of returning a future is treated as a failed future.

    Args:
        operation: Starts the work and returns its future.
        dispatcher: Owner of the interactive thread.
        on_success: Called with the result on the interactive thread.
        on_failure: Called with the error on the interactive thread.
        loading: External flag that also disables the command.
        name: Name used in logs.
    """

    def __init__(
        self,
        operation: Callable[[], Future[T]],
        dispatcher: InteractiveDispatcher,
        on_success: SuccessCallback[T] | None = None,
        on_failure: FailureCallback | None = None,
        loading: BooleanProperty | None = None,
        name: str = "command",
    ) -> None:
        self._operation = operation
        self._dispatcher = dispatcher
        super().__init__(name, on_success, on_failure, loading)

    def _start(self, completion: _Completion) -> Future[T]:
        result: Future[T] = new_future()
        try:
            source = self._operation()
        except Exception as exc:
            source = failed_future(exc)
        source.add_done_callback(partial(self._schedule, completion, result))
        return result

    def _schedule(self, completion: _Completion, result: Future[T], source: Future[T]) -> None:
        try:
            self._dispatcher.call_soon(partial(self._resolve, completion, result, source))
        except DispatcherClosedError as exc:
            logger.warning("Command %r finished after its dispatcher closed", self.name)
            if completion.claim():
                self._finish()
            result.set_exception(exc)

    def _resolve(self, completion: _Completion, result: Future[T], source: Future[T]) -> None:
        if source.cancelled():
            error: BaseException | None = CancelledError(f"Operation of command {self.name!r} was cancelled")
        else:
            error = source.exception()
        try:
            if error is None:
                self._succeeded(completion, source.result())
            else:
                self._failed(completion, error)
        except Exception as exc:
            logger.exception("Error in completion callback of command %r", self.name)
            result.set_exception(exc)
            return
        if error is None:
            result.set_result(source.result())
        else:
            result.set_exception(error)
