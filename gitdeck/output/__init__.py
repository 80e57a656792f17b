"""Output layer: status sink, console rendering, persistent log."""

from .console import (
    ConsoleProtocol,
    ConsoleStatusListener,
    MockConsole,
    RichConsole,
    Style,
)
from .logfile import LogFileListener
from .status import MessageKind, StatusEntry, StatusSink

__all__ = [
    "ConsoleProtocol",
    "ConsoleStatusListener",
    "LogFileListener",
    "MessageKind",
    "MockConsole",
    "RichConsole",
    "StatusEntry",
    "StatusSink",
    "Style",
]
