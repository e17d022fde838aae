"""
CharacterCountEngine - binds counted fields to the feedback pipeline.

Each bind() creates a BindingHandle that exclusively owns the field's
CountState, its FeedbackPublisher and its ChangeReconciler (and therefore
its poll timer). Edits are handled synchronously; focus and blur start and
stop the reconciler; unbind() tears everything down.
"""

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import Settings
from .constants import DEFAULT_THRESHOLD
from .counter import count
from .messages import Message, format_fallback_hint
from .policy import CountPolicy, policy_from_options
from .publisher import (
    AnnouncementSink,
    CountResult,
    Feedback,
    FeedbackPublisher,
    StatusSink,
    Subscriber,
)
from .reconciler import ChangeReconciler, CountState, ReconcilerState
from .text_source import TextSource
from .timing import Clock, Scheduler, SystemClock, ThreadingScheduler

logger = logging.getLogger(__name__)


class BindingHandle:
    """
    A text source bound to the engine.

    Created by CharacterCountEngine.bind(); do not construct directly.
    """

    def __init__(
        self,
        source: TextSource,
        policy: CountPolicy,
        settings: Settings,
        clock: Clock,
        scheduler: Scheduler,
        engine_subscribers: Callable[[], List[Subscriber]],
        status_sink: Optional[StatusSink] = None,
        announcement_sink: Optional[AnnouncementSink] = None,
    ):
        self.id = str(uuid.uuid4())
        self.source = source
        self.policy = policy
        self.clock = clock
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []
        self._engine_subscribers = engine_subscribers
        self._unsubscribers: List[Callable[[], None]] = []
        self._bound = False

        initial = source.get_value() or ""
        self.state = CountState(live_text=initial, last_known_text=initial)
        self.publisher = FeedbackPublisher(
            policy,
            status_sink=status_sink,
            announcement_sink=announcement_sink,
            subscribers=self._all_subscribers,
        )
        self.reconciler = ChangeReconciler(
            source,
            self.state,
            on_drift=self.publisher.publish,
            clock=clock,
            scheduler=scheduler,
            poll_interval_ms=settings.poll_interval_ms,
            debounce_ms=settings.debounce_ms,
            lock=self._lock,
        )

    def _all_subscribers(self) -> List[Subscriber]:
        return list(self._engine_subscribers()) + list(self._subscribers)

    def _attach(self) -> None:
        self._bound = True
        if not self.policy.is_limited:
            logger.info(f"Binding {self.id} has no limit; counting is inactive")
            return

        registrations = (
            (self.source.on_edit, self.handle_edit),
            (self.source.on_focus, self.handle_focus),
            (self.source.on_blur, self.handle_blur),
            (self.source.on_page_show, self.handle_page_show),
        )
        self._unsubscribers = []
        for register, callback in registrations:
            self._unsubscribers.append(register(callback))
        self.reconciler.start()
        # Initial value may already be over the limit
        with self._lock:
            self.publisher.publish(self.state.live_text)

    def _detach(self) -> None:
        with self._lock:
            self.reconciler.stop()
            for unsubscribe in self._unsubscribers:
                unsubscribe()
            self._unsubscribers = []
            self._subscribers = []
            self._bound = False

    @property
    def is_bound(self) -> bool:
        return self._bound

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Subscribe to this binding only. Returns an unsubscribe callable."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def handle_edit(self, value: str) -> Optional[Feedback]:
        """Edit notification: update state and recount immediately."""
        with self._lock:
            if not self._bound:
                return None
            value = value or ""
            self.state.live_text = value
            self.state.last_known_text = value
            self.state.last_edit_timestamp = self.clock.now()
            return self.publisher.publish(value)

    def handle_focus(self) -> None:
        self.reconciler.focus()

    def handle_blur(self) -> None:
        self.reconciler.blur()

    def handle_page_show(self) -> Optional[Feedback]:
        """Page restored from cache: re-read the value and recount."""
        with self._lock:
            if not self._bound:
                return None
            value = self.source.get_value() or ""
            self.state.live_text = value
            self.state.last_known_text = value
            return self.publisher.publish(value)

    @property
    def feedback(self) -> Optional[Feedback]:
        return self.publisher.last_feedback

    @property
    def result(self) -> Optional[CountResult]:
        feedback = self.publisher.last_feedback
        return feedback.result if feedback else None

    @property
    def message(self) -> Optional[Message]:
        feedback = self.publisher.last_feedback
        return feedback.message if feedback else None

    @property
    def visible(self) -> bool:
        feedback = self.publisher.last_feedback
        return feedback.visible if feedback else False

    @property
    def reconciler_state(self) -> ReconcilerState:
        return self.reconciler.status

    @property
    def fallback_hint(self) -> Optional[str]:
        if not self.policy.is_limited:
            return None
        return format_fallback_hint(self.policy.limit, self.policy.unit)


class CharacterCountEngine:
    """
    Counting and feedback engine for limited text fields.

    Usage:
        engine = CharacterCountEngine()
        engine.subscribe(lambda result, message, visible: ...)
        handle = engine.bind(source, {"maxlength": 200, "threshold": 75})
        ...
        engine.unbind(handle)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Initialize engine.

        Args:
            settings: Timing and default settings (default: Settings())
            clock: Time source (default: SystemClock)
            scheduler: Poll timer factory (default: ThreadingScheduler)
        """
        self.settings = settings or Settings()
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or ThreadingScheduler()
        self._subscribers: List[Subscriber] = []
        self._bindings: Dict[str, BindingHandle] = {}

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Subscribe to feedback from every binding.

        Args:
            callback: Called with (result, message, visible) on each recount

        Returns:
            Callable that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def bind(
        self,
        source: TextSource,
        options: Optional[Mapping[str, Any]] = None,
        status_sink: Optional[StatusSink] = None,
        announcement_sink: Optional[AnnouncementSink] = None,
        **kwargs: Any
    ) -> BindingHandle:
        """
        Bind a text source.

        Args:
            source: Field to count
            options: Bind options (maxlength, maxwords, threshold)
            status_sink: Visual status sink for this field
            announcement_sink: Live region sink for this field
            **kwargs: Bind options as keywords

        Returns:
            BindingHandle owning the field's state and timer

        Raises:
            ConfigurationError: If the options are malformed
        """
        policy = policy_from_options(
            options, default_threshold=self.settings.default_threshold, **kwargs
        )
        handle = BindingHandle(
            source,
            policy,
            self.settings,
            self.clock,
            self.scheduler,
            engine_subscribers=lambda: self._subscribers,
            status_sink=status_sink,
            announcement_sink=announcement_sink,
        )
        try:
            handle._attach()
        except Exception:
            handle._detach()
            raise
        self._bindings[handle.id] = handle
        logger.debug(
            f"Bound {handle.id}: mode={policy.mode} limit={policy.limit} "
            f"threshold={policy.threshold}"
        )
        return handle

    def unbind(self, handle: BindingHandle) -> None:
        """Unbind a handle. Unbinding twice is a no-op."""
        if self._bindings.pop(handle.id, None) is None:
            return
        handle._detach()
        logger.debug(f"Unbound {handle.id}")

    @property
    def bindings(self) -> List[BindingHandle]:
        return list(self._bindings.values())

    def close(self) -> None:
        """Unbind every handle."""
        for handle in self.bindings:
            self.unbind(handle)


def evaluate(
    text: str,
    options: Optional[Mapping[str, Any]] = None,
    default_threshold: int = DEFAULT_THRESHOLD,
    **kwargs: Any
) -> Dict[str, Any]:
    """
    Count a one-off text without binding it.

    Used by the HTTP endpoint and the CLI, where there is no live field.

    Args:
        text: Text to count
        options: Bind options (maxlength, maxwords, threshold)
        default_threshold: Threshold used when none is configured
        **kwargs: Bind options as keywords

    Returns:
        Dict with count, remaining, limit, mode, message, is_over_limit,
        visible and fallback_hint (remaining/message fields are None when
        the text is unlimited)

    Raises:
        ConfigurationError: If the options are malformed
    """
    policy = policy_from_options(options, default_threshold=default_threshold, **kwargs)
    feedback = FeedbackPublisher(policy).compute(text or "")

    if feedback is None:
        return {
            "count": count(text or "", policy.mode),
            "remaining": None,
            "limit": None,
            "mode": policy.mode,
            "message": None,
            "is_over_limit": False,
            "visible": False,
            "fallback_hint": None,
        }

    return {
        "count": feedback.result.count,
        "remaining": feedback.result.remaining,
        "limit": policy.limit,
        "mode": policy.mode,
        "message": feedback.message.text,
        "is_over_limit": feedback.message.is_over_limit,
        "visible": feedback.visible,
        "fallback_hint": format_fallback_hint(policy.limit, policy.unit),
    }
