"""
Shared pytest fixtures for test suite.

This module provides the deterministic clock and scheduler used by the
reconciler and engine tests, plus common engine, source and sink fixtures.
"""

import pytest
from unittest.mock import MagicMock

from charactercount.config import Settings
from charactercount.engine import CharacterCountEngine
from charactercount.publisher import AnnouncementSink, StatusSink
from charactercount.text_source import InMemoryTextSource
from charactercount.timing import Clock, Scheduler, TimerHandle


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def set(self, value: float) -> None:
        self.current = value

    def advance(self, ms: float) -> None:
        self.current += ms


class ManualTimer(TimerHandle):
    def __init__(self, interval_ms, callback, next_due):
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due = next_due
        self.cancel_calls = 0
        self._active = True

    def cancel(self) -> None:
        self.cancel_calls += 1
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class ManualScheduler(Scheduler):
    """
    Scheduler driven by advance().

    Timers fire in due order, with the shared FakeClock set to each due time
    before the callback runs.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.timers = []

    def schedule_repeating(self, interval_ms, callback) -> ManualTimer:
        timer = ManualTimer(interval_ms, callback, self.clock.now() + interval_ms)
        self.timers.append(timer)
        return timer

    @property
    def active_timers(self):
        return [timer for timer in self.timers if timer.active]

    def advance(self, ms: float) -> None:
        target = self.clock.now() + ms
        while True:
            due = [timer for timer in self.active_timers if timer.next_due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_due)
            self.clock.set(timer.next_due)
            timer.next_due += timer.interval_ms
            timer.callback()
        self.clock.set(target)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def settings():
    """Default timing: 1000 ms poll, 500 ms debounce."""
    return Settings(poll_interval_ms=1000, debounce_ms=500)


@pytest.fixture
def engine(settings, clock, scheduler):
    engine = CharacterCountEngine(settings=settings, clock=clock, scheduler=scheduler)
    yield engine
    engine.close()


@pytest.fixture
def source():
    return InMemoryTextSource()


@pytest.fixture
def status_sink():
    return MagicMock(spec=StatusSink)


@pytest.fixture
def announcement_sink():
    return MagicMock(spec=AnnouncementSink)


@pytest.fixture
def recorder():
    """Subscriber that records every (result, message, visible) call."""
    calls = []

    def record(result, message, visible):
        calls.append((result, message, visible))

    record.calls = calls
    return record
