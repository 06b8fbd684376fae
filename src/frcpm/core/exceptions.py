"""Custom exceptions.

FRCPM uses a hierarchy of exceptions to provide clear error handling.
Errors raised by submitted work are never wrapped: the original exception
object reaches the failure callback and the future.

Example:
    >>> from frcpm.core.exceptions import FrcpmError, HandleAcquisitionError
    >>> isinstance(HandleAcquisitionError("no connection"), FrcpmError)
    True
    >>> try:
    ...     raise HandleAcquisitionError("pool exhausted")
    ... except DatabaseError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: HandleAcquisitionError
"""

from __future__ import annotations


class FrcpmError(Exception):
    """Base exception for FRCPM.

    Example:
        >>> from frcpm.core.exceptions import FrcpmError
        >>> e = FrcpmError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class ConfigurationError(FrcpmError):
    """Configuration is invalid."""


class TaskStateError(FrcpmError):
    """A task was used in a way its current state does not allow.

    Example:
        >>> from frcpm.core.exceptions import TaskStateError
        >>> raise TaskStateError("task already ran")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        TaskStateError: task already ran
    """


class TaskCancelledError(FrcpmError):
    """A task was cancelled before its work started."""


class ExecutorShutdownError(FrcpmError):
    """Work was submitted to an executor that no longer accepts it.

    Example:
        >>> from frcpm.core.exceptions import ExecutorShutdownError
        >>> raise ExecutorShutdownError("executor is shut down")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ExecutorShutdownError: executor is shut down
    """


class DispatcherClosedError(FrcpmError):
    """A callback was scheduled on an interactive dispatcher that has stopped."""


class DatabaseError(FrcpmError):
    """Database operation failed."""


class HandleAcquisitionError(DatabaseError):
    """A transactional handle could not be obtained.

    Example:
        >>> from frcpm.core.exceptions import HandleAcquisitionError
        >>> raise HandleAcquisitionError("database locked")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        HandleAcquisitionError: database locked
    """


class ServiceNotFoundError(FrcpmError):
    """No service is registered for the requested type."""


class IntegrationError(FrcpmError):
    """An external API request failed.

    Attributes:
        status_code: HTTP status if the server answered, else None.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
