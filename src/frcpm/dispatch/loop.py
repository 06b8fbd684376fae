"""Thread-backed interactive loop.

A stand-in for a UI toolkit's event thread: one thread draining a
thread-safe queue of callbacks, strictly one at a time.

Example:
    >>> from frcpm.dispatch.loop import InteractiveLoop
    >>> loop = InteractiveLoop().start()
    >>> seen = []
    >>> loop.call_soon(lambda: seen.append(loop.is_interactive_thread()))
    >>> loop.drain(timeout=1.0)
    True
    >>> seen
    [True]
    >>> loop.stop()
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from frcpm.core.exceptions import DispatcherClosedError

logger = logging.getLogger(__name__)

_STOP = object()


class InteractiveLoop:
    """Single-threaded callback loop implementing InteractiveDispatcher.

    Either call :meth:`start` to run the loop on a new daemon thread, or
    :meth:`run` to turn the calling thread into the interactive thread until
    :meth:`stop` is called.

    Args:
        name: Thread name used by :meth:`start`.
    """

    def __init__(self, name: str = "frcpm-interactive") -> None:
        self.name = name
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._ident: int | None = None
        self._closed = False
        self._finished = threading.Event()

    def __enter__(self) -> InteractiveLoop:
        return self.start()

    def __exit__(self, *args: object) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return self._ident is not None and not self._finished.is_set()

    def start(self) -> InteractiveLoop:
        """Run the loop on a dedicated thread.

        Returns:
            self, for chaining.
        """
        with self._lock:
            if self._closed:
                raise DispatcherClosedError(f"Loop {self.name!r} is stopped")
            if self._thread is not None or self._ident is not None:
                raise RuntimeError(f"Loop {self.name!r} is already running")
            self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        return self

    def run(self) -> None:
        """Serve callbacks on the calling thread until stopped."""
        with self._lock:
            if self._ident is not None:
                raise RuntimeError(f"Loop {self.name!r} is already running")
            self._ident = threading.get_ident()
        logger.debug("Interactive loop %r started", self.name)
        try:
            while True:
                callback = self._queue.get()
                if callback is _STOP:
                    break
                try:
                    callback()  # type: ignore[operator]
                except Exception:
                    logger.exception("Error in interactive callback")
        finally:
            self._finished.set()
            logger.debug("Interactive loop %r stopped", self.name)

    def call_soon(self, callback: Callable[[], object]) -> None:
        """Queue a callback for the interactive thread.

        Raises:
            DispatcherClosedError: After :meth:`stop`.
        """
        with self._lock:
            if self._closed:
                raise DispatcherClosedError(f"Loop {self.name!r} is stopped")
            self._queue.put(callback)

    def is_interactive_thread(self) -> bool:
        return self._ident is not None and self._ident == threading.get_ident()

    def drain(self, timeout: float | None = None) -> bool:
        """Wait until every callback queued so far has run.

        Returns:
            False if the timeout expired first.
        """
        if self.is_interactive_thread():
            raise RuntimeError("drain() would deadlock on the interactive thread")
        reached = threading.Event()
        self.call_soon(reached.set)
        return reached.wait(timeout)

    def stop(self, wait: bool = True, timeout: float | None = None) -> None:
        """Stop accepting callbacks; already queued ones still run.

        Idempotent.
        """
        with self._lock:
            if not self._closed:
                self._closed = True
                self._queue.put(_STOP)
            thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
