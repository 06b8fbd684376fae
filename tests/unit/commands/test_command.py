"""Tests for AsyncCommand and FutureCommand.

Tests cover:
- executable is false from execute() until the completion callback finished
- The external loading flag
- Exactly-once completion on success, failure and callback errors
- Synchronous submission failures
- Futures completed on other threads, marshalled through the dispatcher
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

import pytest

from frcpm.commands.command import AsyncCommand, Command, FutureCommand
from frcpm.commands.properties import BooleanProperty
from frcpm.core.exceptions import DispatcherClosedError, ExecutorShutdownError
from frcpm.dispatch.loop import InteractiveLoop
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor


@pytest.fixture
def loop():
    loop = InteractiveLoop().start()
    yield loop
    loop.stop(timeout=5)


@pytest.fixture
def executor(loop: InteractiveLoop):
    executor = TaskExecutor(loop, max_workers=2)
    yield executor
    executor.shutdown()


# =============================================================================
# AsyncCommand State Tests
# =============================================================================


class TestAsyncCommandState:
    """running/executable bookkeeping."""

    def test_is_a_command(self) -> None:
        """AsyncCommand satisfies the Command protocol."""
        assert isinstance(AsyncCommand(lambda: None, SyncExecutor()), Command)

    def test_initially_executable(self) -> None:
        """A fresh command is executable and idle."""
        command = AsyncCommand(lambda: None, SyncExecutor())

        assert command.is_executable() is True
        assert command.is_running() is False
        assert command.progress == 0.0

    def test_not_executable_while_running(self, executor: TaskExecutor) -> None:
        """While work is in flight the command is disabled."""
        gate = threading.Event()
        command = AsyncCommand(lambda: gate.wait(5), executor)

        future = command.execute()

        assert command.running is True
        assert command.executable is False
        assert command.execute() is None
        gate.set()
        future.result(timeout=5)
        assert command.running is False
        assert command.executable is True

    def test_disabled_until_callback_finished(self, executor: TaskExecutor) -> None:
        """Inside the completion callback the command is still running."""
        observed: list[tuple[bool, bool]] = []
        command: AsyncCommand[int]

        def on_success(_: int) -> None:
            observed.append((command.running, command.executable))

        command = AsyncCommand(lambda: 1, executor, on_success=on_success)
        command.execute().result(timeout=5)

        assert observed == [(True, False)]
        assert command.executable is True

    def test_progress_complete_after_success(self) -> None:
        """Progress reaches 1.0 on success."""
        command = AsyncCommand(lambda: "ok", SyncExecutor())

        command.execute()

        assert command.progress == 1.0

    def test_executable_property_notifies(self) -> None:
        """Listeners on executable_property see every transition."""
        changes: list[tuple[bool, bool]] = []
        command = AsyncCommand(lambda: None, SyncExecutor())
        command.executable_property.add_listener(lambda old, new: changes.append((old, new)))

        command.execute()

        assert changes == [(True, False), (False, True)]

    def test_can_run_again(self) -> None:
        """A completed command can be executed again."""
        calls: list[int] = []
        command = AsyncCommand(lambda: calls.append(1), SyncExecutor())

        command.execute()
        command.execute()

        assert calls == [1, 1]


# =============================================================================
# Loading Flag Tests
# =============================================================================


class TestAsyncCommandLoading:
    """External loading flag."""

    def test_loading_disables_command(self) -> None:
        """While loading, execute() is a no-op."""
        calls: list[int] = []
        loading = BooleanProperty(True)
        command = AsyncCommand(lambda: calls.append(1), SyncExecutor(), loading=loading)

        assert command.executable is False
        assert command.execute() is None
        assert calls == []

        loading.set(False)

        assert command.executable is True
        command.execute()
        assert calls == [1]

    def test_loading_while_running(self, executor: TaskExecutor) -> None:
        """Clearing loading mid-run keeps the command disabled."""
        gate = threading.Event()
        loading = BooleanProperty(False)
        command = AsyncCommand(lambda: gate.wait(5), executor, loading=loading)

        future = command.execute()
        loading.set(True)
        loading.set(False)

        assert command.executable is False
        gate.set()
        future.result(timeout=5)
        assert command.executable is True


# =============================================================================
# AsyncCommand Failure Tests
# =============================================================================


class TestAsyncCommandFailures:
    """Failure paths clear running exactly once."""

    def test_failure_forwarded(self, loop: InteractiveLoop, executor: TaskExecutor) -> None:
        """Errors reach on_failure on the interactive thread."""
        error = ValueError("x")
        failures: list[tuple[BaseException, bool]] = []

        def work() -> None:
            raise error

        command = AsyncCommand(
            work,
            executor,
            on_failure=lambda exc: failures.append((exc, loop.is_interactive_thread())),
        )
        future = command.execute()

        assert future.exception(timeout=5) is error
        assert failures == [(error, True)]
        assert command.running is False

    def test_failure_logged_without_callback(self, caplog: pytest.LogCaptureFixture) -> None:
        """Without on_failure the error is logged."""
        def work() -> None:
            raise RuntimeError("unhandled")

        command = AsyncCommand(work, SyncExecutor(), name="save-project")

        with caplog.at_level(logging.ERROR, logger="frcpm.commands.command"):
            command.execute()

        assert "save-project" in caplog.text
        assert command.running is False

    def test_callback_error_still_clears_running(self) -> None:
        """A raising callback fails the future but running is cleared."""
        def on_success(_: object) -> None:
            raise KeyError("callback")

        command = AsyncCommand(lambda: 1, SyncExecutor(), on_success=on_success)

        future = command.execute()

        assert isinstance(future.exception(), KeyError)
        assert command.running is False
        assert command.executable is True

    def test_submit_failure(self) -> None:
        """If the executor rejects the work, the failure is delivered."""
        executor = SyncExecutor()
        executor.shutdown()
        failures: list[BaseException] = []
        command = AsyncCommand(lambda: 1, executor, on_failure=failures.append)

        future = command.execute()

        assert isinstance(future.exception(), ExecutorShutdownError)
        assert len(failures) == 1
        assert command.running is False

    def test_rejection_reported_on_interactive_thread(self, loop: InteractiveLoop, executor: TaskExecutor) -> None:
        """A rejected submission reaches on_failure on the interactive thread."""
        executor.shutdown()
        failures: list[tuple[BaseException, bool]] = []
        command = AsyncCommand(
            lambda: 1,
            executor,
            on_failure=lambda exc: failures.append((exc, loop.is_interactive_thread())),
        )

        future = command.execute()

        assert isinstance(future.exception(timeout=5), ExecutorShutdownError)
        assert len(failures) == 1
        assert isinstance(failures[0][0], ExecutorShutdownError)
        assert failures[0][1] is True
        assert command.running is False

    def test_rejection_with_closed_dispatcher(self) -> None:
        """With no interactive thread left, running is still cleared."""
        loop = InteractiveLoop().start()
        executor = TaskExecutor(loop, max_workers=1)
        executor.shutdown()
        loop.stop(timeout=5)
        failures: list[BaseException] = []
        command = AsyncCommand(lambda: 1, executor, on_failure=failures.append)

        future = command.execute()

        assert isinstance(future.exception(timeout=5), DispatcherClosedError)
        assert failures == []
        assert command.running is False
        assert command.executable is True


# =============================================================================
# FutureCommand Tests
# =============================================================================


class TestFutureCommand:
    """Commands over future-returning operations."""

    def test_success_marshalled_to_interactive_thread(self, loop: InteractiveLoop) -> None:
        """Completion on another thread is delivered on the loop."""
        source: Future[str] = Future()
        seen: list[tuple[str, bool, bool]] = []
        command: FutureCommand[str]

        def on_success(value: str) -> None:
            seen.append((value, loop.is_interactive_thread(), command.running))

        command = FutureCommand(lambda: source, loop, on_success=on_success)
        result = command.execute()

        assert command.running is True
        threading.Thread(target=source.set_result, args=("synced",)).start()

        assert result.result(timeout=5) == "synced"
        assert seen == [("synced", True, True)]
        assert command.running is False

    def test_failure(self, loop: InteractiveLoop) -> None:
        """A failed source future goes to on_failure."""
        source: Future[str] = Future()
        failures: list[BaseException] = []
        command = FutureCommand(lambda: source, loop, on_failure=failures.append)

        result = command.execute()
        source.set_exception(ValueError("offline"))

        assert isinstance(result.exception(timeout=5), ValueError)
        assert len(failures) == 1
        assert command.running is False

    def test_operation_raising_synchronously(self, loop: InteractiveLoop) -> None:
        """An operation that raises is delivered like a failed future."""
        failures: list[BaseException] = []

        def operation() -> Future[str]:
            raise ConnectionError("no network")

        command = FutureCommand(operation, loop, on_failure=failures.append)
        result = command.execute()

        assert isinstance(result.exception(timeout=5), ConnectionError)
        assert len(failures) == 1
        assert command.running is False

    def test_cancelled_source(self, loop: InteractiveLoop) -> None:
        """A cancelled source future counts as a failure."""
        source: Future[str] = Future()
        failures: list[BaseException] = []
        command = FutureCommand(lambda: source, loop, on_failure=failures.append)

        result = command.execute()
        source.cancel()

        assert result.exception(timeout=5) is not None
        assert len(failures) == 1
        assert command.running is False

    def test_closed_dispatcher(self) -> None:
        """With the dispatcher gone, running is cleared and no callback runs."""
        loop = InteractiveLoop().start()
        source: Future[str] = Future()
        calls: list[object] = []
        command = FutureCommand(lambda: source, loop, on_success=calls.append, on_failure=calls.append)

        result = command.execute()
        loop.stop()
        source.set_result("late")

        assert isinstance(result.exception(timeout=5), DispatcherClosedError)
        assert calls == []
        assert command.running is False

    def test_loading_disables(self, loop: InteractiveLoop) -> None:
        """The loading flag applies to FutureCommand too."""
        loading = BooleanProperty(True)
        command = FutureCommand(lambda: Future(), loop, loading=loading)

        assert command.execute() is None
