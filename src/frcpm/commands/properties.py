"""Observable values for command state.

A tiny stand-in for UI toolkit properties: a value plus change listeners.
Listeners run on the thread that changed the value and receive
``(old, new)``; setting an equal value notifies nobody.

Example:
    >>> from frcpm.commands.properties import BooleanProperty
    >>> loading = BooleanProperty()
    >>> changes = []
    >>> loading.add_listener(lambda old, new: changes.append((old, new)))
    >>> loading.set(True)
    >>> loading.set(True)
    >>> changes
    [(False, True)]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

V = TypeVar("V")

logger = logging.getLogger(__name__)

ChangeListener = Callable[[V, V], object]


class ObservableValue(Generic[V]):
    """Thread-safe value with change notification."""

    def __init__(self, initial: V) -> None:
        self._value = initial
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener[V]] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def get(self) -> V:
        with self._lock:
            return self._value

    def set(self, value: V) -> None:
        with self._lock:
            old = self._value
            if old == value:
                return
            self._value = value
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(old, value)
            except Exception:
                logger.exception("Error in change listener of %r", self)

    @property
    def value(self) -> V:
        return self.get()

    @value.setter
    def value(self, value: V) -> None:
        self.set(value)

    def add_listener(self, listener: ChangeListener[V]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener[V]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)


class BooleanProperty(ObservableValue[bool]):
    def __init__(self, initial: bool = False) -> None:
        super().__init__(bool(initial))

    def set(self, value: bool) -> None:
        super().set(bool(value))


class DoubleProperty(ObservableValue[float]):
    def __init__(self, initial: float = 0.0) -> None:
        super().__init__(float(initial))

    def set(self, value: float) -> None:
        super().set(float(value))
