"""Logging-based task progress reporter.

A task listener that writes one log line per snapshot, suitable for the
CLI, scripts and CI where nothing renders a progress bar.

Example:
    >>> from frcpm.models.task import Task
    >>> from frcpm.reporter.simple import LoggingTaskReporter
    >>> task = Task("seed", lambda: None)
    >>> LoggingTaskReporter().attach(task)
    >>> task.run()

    # Output in logs:
    # [RUNNING] seed
    # [SUCCEEDED] seed (0.0s)
"""

from __future__ import annotations

import logging
import time

from frcpm.models.task import Task, TaskSnapshot, TaskStatus


class LoggingTaskReporter:
    """Logs task snapshots.

    Running tasks with a known total are logged as ``current/total (pct%)``;
    terminal snapshots include the time since the task was first seen.

    Args:
        logger: Logger to use (default: ``frcpm.progress``).
        log_level: Level for progress lines; failures use ERROR.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        log_level: int = logging.INFO,
    ) -> None:
        self._logger = logger or logging.getLogger("frcpm.progress")
        self._log_level = log_level
        self._started: dict[str, float] = {}

    def attach(self, task: Task) -> None:
        """Subscribe to ``task``'s progress."""
        task.add_listener(self)

    def __call__(self, snapshot: TaskSnapshot) -> None:
        started = self._started.setdefault(snapshot.id, time.monotonic())
        label = f"[{snapshot.status.value.upper()}] {snapshot.name}"

        if snapshot.status.is_terminal:
            self._started.pop(snapshot.id, None)
            elapsed = time.monotonic() - started
            level = logging.ERROR if snapshot.status is TaskStatus.FAILED else self._log_level
            suffix = f": {snapshot.message}" if snapshot.status is TaskStatus.FAILED and snapshot.message else ""
            self._logger.log(level, f"{label} ({elapsed:.1f}s){suffix}")
        elif snapshot.total > 0:
            line = f"{label}: {snapshot.current:g}/{snapshot.total:g} ({snapshot.percent:.0f}%)"
            if snapshot.message:
                line = f"{line} {snapshot.message}"
            self._logger.log(self._log_level, line)
        else:
            self._logger.log(self._log_level, f"{label} {snapshot.message}".rstrip())


__all__ = ["LoggingTaskReporter"]
