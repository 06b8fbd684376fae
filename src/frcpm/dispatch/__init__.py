"""Interactive-thread dispatchers.

Example:
    >>> from frcpm.dispatch import AsyncioDispatcher, InteractiveLoop
"""

from frcpm.dispatch.aio import AsyncioDispatcher
from frcpm.dispatch.loop import InteractiveLoop

__all__ = [
    "AsyncioDispatcher",
    "InteractiveLoop",
]
