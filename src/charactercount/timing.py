"""
Clock and timer abstractions.

The reconciler reads time through a Clock and schedules its poll through a
Scheduler, so both can be replaced in tests. Times are milliseconds.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Interface for reading the current time."""

    @abstractmethod
    def now(self) -> float:
        """Return the current time in milliseconds."""
        ...


class SystemClock(Clock):
    """Monotonic wall clock."""

    def now(self) -> float:
        return time.monotonic() * 1000.0


class TimerHandle(ABC):
    """An owned, cancellable repeating timer."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Cancelling a cancelled timer is a no-op."""
        ...

    @property
    @abstractmethod
    def active(self) -> bool:
        ...


class Scheduler(ABC):
    """Interface for scheduling repeating callbacks."""

    @abstractmethod
    def schedule_repeating(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Call callback every interval_ms until the returned handle is cancelled.

        Args:
            interval_ms: Interval between calls in milliseconds
            callback: Zero-argument callable

        Returns:
            TimerHandle owned by the caller
        """
        ...


class _ThreadTimerHandle(TimerHandle):
    """Repeating timer backed by a daemon thread."""

    def __init__(self, interval_ms: float, callback: Callable[[], None]):
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="charactercount-poll", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self._callback()
            except Exception:
                # A failing tick must not kill the poll loop
                logger.exception("Reconciliation tick failed")

    def cancel(self) -> None:
        self._stopped.set()

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()


class ThreadingScheduler(Scheduler):
    """Scheduler that runs each repeating timer on its own daemon thread."""

    def schedule_repeating(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        return _ThreadTimerHandle(interval_ms, callback)
