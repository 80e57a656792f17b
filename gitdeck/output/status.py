"""Status sink: the append-only progress log.

Any thread may post. Each post is split into lines, each line is truncated
to the configured bound, optionally time-stamped, and appended as one entry.
Appending and listener fan-out happen under one lock, so entries and listener
calls appear in the order posts were made and never interleave.

Two kinds of listeners exist:
- entry listeners see every recorded line (the visible console)
- message listeners see every post once, untruncated (the persistent log)

Usage:
    sink = StatusSink(timestamps=True, clock_24h=False)
    sink.add_entry_listener(console_listener)
    sink.post("git fetch origin main", MessageKind.COMMAND)
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

from gitdeck.core.config import MAX_STATUS_LINE_LENGTH, StatusConfig

__all__ = [
    "EntryListener",
    "MessageKind",
    "MessageListener",
    "StatusEntry",
    "StatusSink",
]

# Only real line breaks; form feeds and other separators stay inside a line
_LINE_BREAK = re.compile(r"\r?\n")


class MessageKind(Enum):
    """Kind of a status message, drives how it is rendered."""

    GENERAL = auto()
    COMMAND = auto()
    OUTPUT = auto()
    ERROR = auto()
    DEBUG = auto()
    NEW_VERSION = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One recorded status line.

    Attributes:
        text: Rendered line (timestamp prefix included, if enabled)
        kind: Kind shared by all lines of the same post
    """

    text: str
    kind: MessageKind


EntryListener = Callable[[StatusEntry], None]
MessageListener = Callable[[str, MessageKind], None]


class StatusSink:
    """Thread-safe, append-only list of status entries."""

    def __init__(
        self,
        *,
        timestamps: bool = False,
        clock_24h: bool = True,
        max_line_length: int = MAX_STATUS_LINE_LENGTH,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.timestamps = timestamps
        self.clock_24h = clock_24h
        self.max_line_length = max_line_length
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: list[StatusEntry] = []
        self._entry_listeners: list[EntryListener] = []
        self._message_listeners: list[MessageListener] = []

    @classmethod
    def from_config(cls, config: StatusConfig) -> StatusSink:
        return cls(
            timestamps=config.timestamps,
            clock_24h=config.clock_24h,
            max_line_length=config.max_line_length,
        )

    def add_entry_listener(self, listener: EntryListener) -> None:
        with self._lock:
            self._entry_listeners.append(listener)

    def add_message_listener(self, listener: MessageListener) -> None:
        with self._lock:
            self._message_listeners.append(listener)

    def post(self, message: str | None, kind: MessageKind = MessageKind.GENERAL) -> None:
        """Record a message. None and "" are dropped silently."""
        if not message:
            return

        with self._lock:
            stamp = self._stamp()
            new_entries = [
                StatusEntry(stamp + line[: self.max_line_length], kind)
                for line in _split_lines(message)
            ]
            self._entries.extend(new_entries)
            for entry in new_entries:
                for entry_listener in self._entry_listeners:
                    entry_listener(entry)
            for message_listener in self._message_listeners:
                message_listener(message, kind)

    def _stamp(self) -> str:
        if not self.timestamps:
            return ""
        fmt = "%H:%M:%S" if self.clock_24h else "%I:%M:%S"
        return self._clock().strftime(fmt) + " "

    def entries(self) -> list[StatusEntry]:
        with self._lock:
            return list(self._entries)

    def last(self) -> StatusEntry | None:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def text(self) -> str:
        """All entries as newline-separated text (what "copy" puts on the clipboard)."""
        with self._lock:
            return "\n".join(e.text for e in self._entries)

    def clear(self) -> None:
        """Drop recorded entries; the persistent log is not affected."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _split_lines(message: str) -> list[str]:
    lines = _LINE_BREAK.split(message)
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines
