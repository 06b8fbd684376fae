"""Tests for TaskFactory."""

from __future__ import annotations

import time

import pytest

from frcpm.core.exceptions import ConfigurationError
from frcpm.database.task import DatabaseTask
from frcpm.dispatch.loop import InteractiveLoop
from frcpm.executor.factory import BatchTask, TaskFactory
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor
from frcpm.models.task import Task


class RecordingHandle:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def begin(self) -> None:
        self.calls.append("begin")

    def commit(self) -> None:
        self.calls.append("commit")

    def rollback(self) -> None:
        self.calls.append("rollback")

    def release(self) -> None:
        self.calls.append("release")


class RecordingProvider:
    def __init__(self) -> None:
        self.handles: list[RecordingHandle] = []

    def acquire_handle(self) -> RecordingHandle:
        handle = RecordingHandle()
        self.handles.append(handle)
        return handle


class TestTaskFactory:
    """TaskFactory shortcuts."""

    def test_run_data_load(self) -> None:
        """Loads run through the executor with callbacks."""
        loaded: list[list[str]] = []
        factory = TaskFactory(SyncExecutor())

        future = factory.run_data_load(lambda: ["robot"], loaded.append)

        assert future.result() == ["robot"]
        assert loaded == [["robot"]]

    def test_run_data_save_and_report(self) -> None:
        """Saves and reports are plain submissions."""
        factory = TaskFactory(SyncExecutor())

        assert factory.run_data_save(lambda: True).result() is True
        assert factory.run_report(lambda: "report.pdf").result() == "report.pdf"

    def test_create_database_task_requires_provider(self) -> None:
        """Database tasks need a provider."""
        factory = TaskFactory(SyncExecutor())

        with pytest.raises(ConfigurationError):
            factory.create_database_task("save", lambda handle: None)

    def test_run_database(self) -> None:
        """Database operations run in a transaction."""
        provider = RecordingProvider()
        factory = TaskFactory(SyncExecutor(), provider)

        task = factory.create_database_task("count", lambda handle: 3)
        assert isinstance(task, DatabaseTask)

        assert factory.run_database("count", lambda handle: 3).result() == 3
        assert provider.handles[-1].calls == ["begin", "commit", "release"]

    def test_run_batch_reports_progress(self) -> None:
        """Batch progress fractions reach on_progress."""
        fractions: list[float] = []
        factory = TaskFactory(SyncExecutor())

        def processor(task: Task[int]) -> int:
            for i in range(1, 5):
                task.update_progress(i, 4)
            return 4

        assert factory.run_batch(processor, fractions.append).result() == 4
        assert fractions[1:5] == [0.25, 0.5, 0.75, 1.0]

    def test_run_batch_progress_on_interactive_thread(self) -> None:
        """With a threaded executor, progress arrives on the loop."""
        loop = InteractiveLoop().start()
        executor = TaskExecutor(loop, max_workers=1)
        seen: list[bool] = []
        try:
            def processor(task: Task[str]) -> str:
                task.update_progress(1, 2)
                return "done"

            factory = TaskFactory(executor)
            assert factory.run_batch(processor, lambda _: seen.append(loop.is_interactive_thread())).result(timeout=5) == "done"
            assert loop.drain(timeout=5)
        finally:
            executor.shutdown()
            loop.stop(timeout=5)

        assert seen and all(seen)

    def test_batch_task_passes_itself(self) -> None:
        """BatchTask hands itself to the processor."""
        received: list[Task] = []
        task: BatchTask[None] = BatchTask("batch", received.append)

        task.run()

        assert received == [task]

    def test_schedule_periodic(self) -> None:
        """schedule_periodic returns a started repeating task."""
        factory = TaskFactory(SyncExecutor())
        job = factory.schedule_periodic(lambda: None, period=0.01)
        try:
            deadline = time.monotonic() + 5
            while job.run_count == 0 and time.monotonic() < deadline:
                time.sleep(0.005)
        finally:
            job.cancel()
            job.join(timeout=5)

        assert job.run_count >= 1
