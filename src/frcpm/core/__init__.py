"""Core configuration, errors and logging."""

from frcpm.core.config import Settings, get_settings
from frcpm.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    DispatcherClosedError,
    ExecutorShutdownError,
    FrcpmError,
    HandleAcquisitionError,
    IntegrationError,
    ServiceNotFoundError,
    TaskCancelledError,
    TaskStateError,
)
from frcpm.core.logging import configure_logging

__all__ = [
    # Configuration
    "Settings",
    "configure_logging",
    "get_settings",
    # Errors
    "ConfigurationError",
    "DatabaseError",
    "DispatcherClosedError",
    "ExecutorShutdownError",
    "FrcpmError",
    "HandleAcquisitionError",
    "IntegrationError",
    "ServiceNotFoundError",
    "TaskCancelledError",
    "TaskStateError",
]
