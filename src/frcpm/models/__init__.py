"""Pydantic models and task state for FRCPM."""

from frcpm.models.base import ApiModel, FrcpmModel
from frcpm.models.task import Task, TaskListener, TaskSnapshot, TaskStatus

__all__ = [
    # Base
    "ApiModel",
    "FrcpmModel",
    # Tasks
    "Task",
    "TaskListener",
    "TaskSnapshot",
    "TaskStatus",
]
