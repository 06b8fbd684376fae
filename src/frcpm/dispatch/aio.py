"""asyncio-backed interactive dispatcher.

Lets an asyncio event loop act as the interactive thread, so callers can
``await`` executor futures instead of chaining callbacks.

Example:
    >>> import asyncio
    >>> from frcpm.dispatch.aio import AsyncioDispatcher
    >>> async def main():
    ...     dispatcher = AsyncioDispatcher.for_running_loop()
    ...     return dispatcher.is_interactive_thread()
    >>> asyncio.run(main())
    True
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar

from frcpm.core.exceptions import DispatcherClosedError

T = TypeVar("T")


class AsyncioDispatcher:
    """InteractiveDispatcher running callbacks on an asyncio loop.

    Args:
        loop: The event loop that owns the interactive thread.
        thread_id: ``threading.get_ident()`` of the loop's thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, thread_id: int) -> None:
        self._loop = loop
        self._thread_id = thread_id

    @classmethod
    def for_running_loop(cls) -> AsyncioDispatcher:
        """Bind to the loop running in the current thread."""
        return cls(asyncio.get_running_loop(), threading.get_ident())

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def call_soon(self, callback: Callable[[], object]) -> None:
        if self._loop.is_closed():
            raise DispatcherClosedError("Event loop is closed")
        try:
            self._loop.call_soon_threadsafe(callback)
        except RuntimeError as exc:
            raise DispatcherClosedError(str(exc)) from exc

    def is_interactive_thread(self) -> bool:
        return threading.get_ident() == self._thread_id

    def wrap(self, future: Future[T]) -> asyncio.Future[T]:
        """Turn an executor future into an awaitable on this loop."""
        return asyncio.wrap_future(future, loop=self._loop)
