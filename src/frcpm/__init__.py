"""
FRCPM - background task core for FRC team project management.

Runs database operations, data loads and API calls on a fixed pool of
worker threads and delivers every outcome, exactly once, on a single
interactive thread. Progress and status are observable while work runs.

Key Features:
- Tasks with status, progress and message, observable through snapshots
- Fixed-size executor with interactive-thread callbacks
- Transactional database tasks (acquire, begin, commit, rollback, release)
- UI command adapters with running/executable state
- Read-only clients for The Blue Alliance and the FRC Events API

Quick Start:
    >>> from frcpm import AppContext, Settings
    >>> with AppContext(Settings(database_url="sqlite://")) as context:
    ...     context.executor.submit(lambda: 6 * 7).result(timeout=5)
    42
"""

# Commands
from frcpm.commands.command import AsyncCommand, FutureCommand
from frcpm.commands.properties import BooleanProperty, DoubleProperty

# Core
from frcpm.core.config import Settings, get_settings
from frcpm.core.context import AppContext, ServiceRegistry
from frcpm.core.exceptions import FrcpmError

# Database
from frcpm.database.provider import SQLAlchemyProvider
from frcpm.database.task import DatabaseStage, DatabaseTask

# Dispatch
from frcpm.dispatch.aio import AsyncioDispatcher
from frcpm.dispatch.loop import InteractiveLoop

# Executor backends
from frcpm.executor.factory import TaskFactory
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor

# Models
from frcpm.models.task import Task, TaskSnapshot, TaskStatus

# Reporter
from frcpm.reporter.simple import LoggingTaskReporter

__version__ = "0.1.0"

__all__ = [
    # Commands
    "AsyncCommand",
    "BooleanProperty",
    "DoubleProperty",
    "FutureCommand",
    # Core
    "AppContext",
    "FrcpmError",
    "ServiceRegistry",
    "Settings",
    "get_settings",
    # Database
    "DatabaseStage",
    "DatabaseTask",
    "SQLAlchemyProvider",
    # Dispatch
    "AsyncioDispatcher",
    "InteractiveLoop",
    # Executor
    "SyncExecutor",
    "TaskExecutor",
    "TaskFactory",
    # Models
    "Task",
    "TaskSnapshot",
    "TaskStatus",
    # Reporter
    "LoggingTaskReporter",
]
