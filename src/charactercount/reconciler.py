"""
Change reconciliation for focused fields.

Dictation software, browser autofill and similar tools can change a field's
value without firing an edit notification. While a field is focused the
ChangeReconciler polls the live value and, once the user has been idle for
the debounce window, feeds any drift back through the counting pipeline.

States:
    IDLE    -> BLURRED on start()
    BLURRED -> FOCUSED on focus(), starting the poll timer
    FOCUSED -> BLURRED on blur(), cancelling the timer
    any     -> IDLE    on stop(), cancelling the timer
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .constants import DEFAULT_DEBOUNCE_MS, DEFAULT_POLL_INTERVAL_MS
from .text_source import TextSource
from .timing import Clock, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class ReconcilerState(Enum):
    IDLE = "idle"
    BLURRED = "blurred"
    FOCUSED = "focused"


@dataclass
class CountState:
    """
    Per-binding text state.

    Attributes:
        live_text: Most recent value seen through any path
        last_known_text: Value the published feedback was computed from
        last_edit_timestamp: Clock time of the last edit notification, or None
    """

    live_text: str = ""
    last_known_text: str = ""
    last_edit_timestamp: Optional[float] = None


class ChangeReconciler:
    """Polls a focused TextSource for out-of-band value changes."""

    def __init__(
        self,
        source: TextSource,
        state: CountState,
        on_drift: Callable[[str], None],
        clock: Clock,
        scheduler: Scheduler,
        poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        lock: Optional[threading.RLock] = None,
    ):
        """
        Initialize reconciler.

        Args:
            source: Field being watched
            state: CountState owned by the same binding
            on_drift: Called with the new value when drift is reconciled
            clock: Time source for the debounce check
            scheduler: Creates the poll timer
            poll_interval_ms: Poll period while focused
            debounce_ms: Idle time required after the last edit
            lock: Lock shared with the binding's edit path
        """
        self.source = source
        self.state = state
        self.on_drift = on_drift
        self.clock = clock
        self.scheduler = scheduler
        self.poll_interval_ms = poll_interval_ms
        self.debounce_ms = debounce_ms
        self._lock = lock or threading.RLock()
        self._status = ReconcilerState.IDLE
        self._timer: Optional[TimerHandle] = None

    @property
    def status(self) -> ReconcilerState:
        return self._status

    @property
    def timer(self) -> Optional[TimerHandle]:
        return self._timer

    def start(self) -> None:
        with self._lock:
            if self._status is ReconcilerState.IDLE:
                self._status = ReconcilerState.BLURRED

    def focus(self) -> None:
        with self._lock:
            if self._status is not ReconcilerState.BLURRED:
                logger.debug(f"Ignoring focus in state {self._status.value}")
                return
            self._timer = self.scheduler.schedule_repeating(self.poll_interval_ms, self.tick)
            self._status = ReconcilerState.FOCUSED

    def blur(self) -> None:
        with self._lock:
            if self._status is not ReconcilerState.FOCUSED:
                return
            self._cancel_timer()
            self._status = ReconcilerState.BLURRED

    def stop(self) -> None:
        """Tear down. Safe to call in any state, any number of times."""
        with self._lock:
            self._cancel_timer()
            self._status = ReconcilerState.IDLE

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def is_settled(self) -> bool:
        """True when no edit happened within the debounce window."""
        last_edit = self.state.last_edit_timestamp
        if last_edit is None:
            return True
        return self.clock.now() - last_edit >= self.debounce_ms

    def tick(self) -> bool:
        """
        Run one poll.

        Returns:
            True if drift was found and reconciled
        """
        with self._lock:
            # A tick can still arrive from a timer cancelled moments ago
            if self._status is not ReconcilerState.FOCUSED:
                return False
            if not self.is_settled():
                return False

            live = self.source.get_value()
            if live == self.state.last_known_text:
                return False

            logger.debug("Reconciling value changed outside edit notifications")
            self.state.live_text = live
            self.state.last_known_text = live
            self.on_drift(live)
            return True
