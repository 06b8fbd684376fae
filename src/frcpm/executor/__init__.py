"""Executor backends and task helpers."""

from frcpm.executor.factory import BatchTask, TaskFactory
from frcpm.executor.periodic import RepeatingTask
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor

__all__ = [
    "BatchTask",
    "RepeatingTask",
    "SyncExecutor",
    "TaskExecutor",
    "TaskFactory",
]
