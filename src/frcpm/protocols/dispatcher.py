"""Interactive dispatcher protocol.

The interactive thread is the single thread allowed to touch user-facing
state and to receive completion callbacks. Whatever owns that thread (a UI
toolkit, an asyncio loop, :class:`frcpm.dispatch.loop.InteractiveLoop`)
only has to offer "run this callback over there".

Example:
    >>> from frcpm.protocols.dispatcher import InteractiveDispatcher
    >>> hasattr(InteractiveDispatcher, "call_soon")
    True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class InteractiveDispatcher(Protocol):
    """Schedules callbacks onto the interactive thread."""

    def call_soon(self, callback: Callable[[], object]) -> None:
        """Queue ``callback`` to run on the interactive thread.

        Callbacks run one at a time, in the order they were queued.

        Raises:
            DispatcherClosedError: If the dispatcher no longer runs callbacks.
        """
        ...

    def is_interactive_thread(self) -> bool:
        """True when called from the interactive thread."""
        ...
