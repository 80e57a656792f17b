"""Tests for gitdeck.events.busy."""

from __future__ import annotations

import time

from gitdeck.events.busy import BusyDebouncer, RecordingIndicator, thread_timer


def _debouncer(timers) -> tuple[BusyDebouncer, RecordingIndicator]:
    indicator = RecordingIndicator()
    return BusyDebouncer(indicator, delay=0.3, timer_factory=timers), indicator


class TestBusyDebouncer:
    def test_busy_shows_immediately(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        assert indicator.transitions == [True]
        assert debouncer.shown

    def test_not_busy_waits_for_delay(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(False)

        assert indicator.transitions == [True]
        assert timers.pending[0].delay == 0.3

        timers.fire_all()
        assert indicator.transitions == [True, False]
        assert not debouncer.shown

    def test_busy_within_delay_never_shows_not_busy(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(False)
        debouncer.set_busy(True)

        timers.fire_all()

        assert indicator.transitions == [True]
        assert debouncer.shown

    def test_stale_timer_is_ignored(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(False)
        stale = timers.timers[0]
        debouncer.set_busy(True)

        stale.fire()

        assert indicator.transitions == [True]

    def test_repeated_not_busy_rearms(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(False)
        debouncer.set_busy(False)

        assert timers.timers[0].cancelled
        assert len(timers.pending) == 1

        timers.fire_all()
        assert indicator.transitions == [True, False]

    def test_not_busy_when_idle_shows_nothing(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(False)
        timers.fire_all()
        assert indicator.transitions == []

    def test_repeated_busy_shows_once(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(True)
        assert indicator.transitions == [True]

    def test_flush_applies_pending_not_busy(self, timers) -> None:
        debouncer, indicator = _debouncer(timers)
        debouncer.set_busy(True)
        debouncer.set_busy(False)

        debouncer.flush()

        assert indicator.transitions == [True, False]

    def test_synchronous_timer_does_not_deadlock(self) -> None:
        indicator = RecordingIndicator()

        def immediate(delay: float, callback):
            callback()
            return _NoopTimer()

        debouncer = BusyDebouncer(indicator, delay=0.3, timer_factory=immediate)
        debouncer.set_busy(True)
        debouncer.set_busy(False)

        assert indicator.transitions == [True, False]


class _NoopTimer:
    def cancel(self) -> None:
        pass


class TestThreadTimer:
    def test_real_timer_hides_after_delay(self) -> None:
        indicator = RecordingIndicator()
        debouncer = BusyDebouncer(indicator, delay=0.05, timer_factory=thread_timer)

        debouncer.set_busy(True)
        debouncer.set_busy(False)

        deadline = time.monotonic() + 5
        while debouncer.shown and time.monotonic() < deadline:
            time.sleep(0.01)

        assert indicator.transitions == [True, False]
