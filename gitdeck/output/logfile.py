"""Persistent status log.

Receives every status post, untruncated, and appends it to a text file with
a date-time stamp and the message kind. The file is opened per post so the
log survives crashes and can be tailed while a batch runs.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from gitdeck.core.result import Err, Ok, Result
from gitdeck.output.status import MessageKind

__all__ = ["LogFileListener"]


class LogFileListener:
    """Status sink message listener writing to a log file.

    Write failures do not interrupt the batch that produced the message; the
    first one is kept in `last_error` and further writes are skipped.
    """

    def __init__(self, path: Path, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self.path = path
        self._clock = clock
        self.last_error: OSError | None = None

    def open(self) -> Result[Path, OSError]:
        """Create the log's directory and check it can be appended to."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8"):
                pass
        except OSError as e:
            self.last_error = e
            return Err(e)
        return Ok(self.path)

    def __call__(self, message: str, kind: MessageKind) -> None:
        if self.last_error is not None:
            return
        stamp = self._clock().strftime("%Y-%m-%d %H:%M:%S")
        lines = message.splitlines() or [""]
        try:
            with self.path.open("a", encoding="utf-8") as f:
                for line in lines:
                    f.write(f"{stamp} [{kind}] {line}\n")
        except OSError as e:
            self.last_error = e
