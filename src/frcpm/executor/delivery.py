"""Completion delivery shared by executors.

These helpers run on the interactive thread. They invoke exactly one user
callback and then resolve the future, so a future is only ever resolved
after its callback has finished.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, TypeVar

from frcpm.models.task import Task
from frcpm.protocols.executor import FailureCallback, SuccessCallback

T = TypeVar("T")

logger = logging.getLogger(__name__)


def new_future() -> Future[Any]:
    """Create a future that callers cannot cancel."""
    future: Future[Any] = Future()
    future.set_running_or_notify_cancel()
    return future


def failed_future(error: BaseException) -> Future[Any]:
    """Create a future already failed with ``error``."""
    future = new_future()
    future.set_exception(error)
    return future


def deliver_success(
    task: Task[T],
    result: T,
    on_success: SuccessCallback[T] | None,
    future: Future[T],
) -> None:
    try:
        if on_success is not None:
            on_success(result)
    except Exception as exc:
        logger.exception("Error in success callback for task %r", task.name)
        future.set_exception(exc)
    else:
        future.set_result(result)


def deliver_failure(
    task: Task[T],
    error: BaseException,
    on_failure: FailureCallback | None,
    future: Future[T],
) -> None:
    try:
        if on_failure is not None:
            on_failure(error)
    except Exception as exc:
        logger.exception("Error in failure callback for task %r", task.name)
        future.set_exception(exc)
    else:
        future.set_exception(error)
