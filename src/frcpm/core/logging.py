"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers for the root ``frcpm`` logger.

Example:
    >>> from frcpm.core.logging import configure_logging
    >>> logger = configure_logging("WARNING", "plain")
    >>> logger.name
    'frcpm'
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO", fmt: str = "console") -> logging.Logger:
    """Install a single handler on the ``frcpm`` logger.

    Args:
        level: Logging level name or number.
        fmt: ``console`` for Rich output on stderr, ``plain`` for a
            timestamped text format.

    Returns:
        The configured ``frcpm`` logger.
    """
    logger = logging.getLogger("frcpm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if fmt == "console":
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("[%(threadName)s] %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
