"""UI command adapters around background work."""

from frcpm.commands.command import AsyncCommand, Command, FutureCommand
from frcpm.commands.properties import BooleanProperty, DoubleProperty, ObservableValue

__all__ = [
    "AsyncCommand",
    "BooleanProperty",
    "Command",
    "DoubleProperty",
    "FutureCommand",
    "ObservableValue",
]
