"""Task progress reporters."""

from frcpm.reporter.simple import LoggingTaskReporter

__all__ = ["LoggingTaskReporter"]
