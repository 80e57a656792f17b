"""Busy signal debouncer.

Successive operations toggle busy on and off in quick succession. Turning
busy on is shown at once; turning it off is delayed, and a new "busy" within
the delay supersedes the pending "not busy" so the indicator never flickers.

Usage:
    debouncer = BusyDebouncer(RichBusyIndicator(console), delay=0.3)
    broadcaster.set_busy_consumer(debouncer.set_busy)
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from gitdeck.core.config import BUSY_DELAY_SECONDS

if TYPE_CHECKING:
    from rich.console import Console
    from rich.status import Status

__all__ = [
    "BusyDebouncer",
    "BusyIndicator",
    "RecordingIndicator",
    "RichBusyIndicator",
    "TimerHandle",
    "thread_timer",
]


class BusyIndicator(Protocol):
    def show(self, busy: bool) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def thread_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class BusyDebouncer:
    """Coalesces busy/not-busy requests into visible transitions."""

    def __init__(
        self,
        indicator: BusyIndicator,
        *,
        delay: float = BUSY_DELAY_SECONDS,
        timer_factory: TimerFactory = thread_timer,
    ) -> None:
        self._indicator = indicator
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._requested = False
        self._shown = False
        self._pending: TimerHandle | None = None
        self._generation = 0

    @property
    def shown(self) -> bool:
        """Busy state currently visible on the indicator."""
        return self._shown

    def set_busy(self, busy: bool) -> None:
        with self._lock:
            self._requested = busy
            if busy:
                if self._pending is not None:
                    self._pending.cancel()
                    self._pending = None
                    self._generation += 1
                if not self._shown:
                    self._shown = True
                    self._indicator.show(True)
                return
            # Re-arming restarts the delay window
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._timer_factory(self._delay, lambda: self._expire(generation))

    def _expire(self, generation: int) -> None:
        with self._lock:
            # A timer that fired while being re-armed or cancelled is stale
            if generation != self._generation:
                return
            self._pending = None
            if self._requested or not self._shown:
                return
            self._shown = False
            self._indicator.show(False)

    def flush(self) -> None:
        """Apply a pending "not busy" now (used at shutdown)."""
        with self._lock:
            pending = self._pending
        if pending is not None:
            pending.cancel()
            self._expire(self._generation)


@dataclass
class RecordingIndicator:
    """Indicator that records every visible transition (for tests)."""

    transitions: list[bool] = field(default_factory=list)

    def show(self, busy: bool) -> None:
        self.transitions.append(busy)


class RichBusyIndicator:
    """Shows a Rich spinner while busy."""

    def __init__(self, console: Console, message: str = "working...") -> None:
        self._console = console
        self._message = message
        self._status: Status | None = None

    def show(self, busy: bool) -> None:
        if busy and self._status is None:
            self._status = self._console.status(self._message)
            self._status.start()
        elif not busy and self._status is not None:
            self._status.stop()
            self._status = None
