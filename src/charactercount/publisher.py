"""
Feedback publication.

Each recount produces a CountResult, a Message and a visibility flag. The
publisher pushes them to the visual status sink, the assistive announcement
sink (live region) and every engine subscriber.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .counter import count
from .messages import Message, format_message
from .policy import CountPolicy
from .threshold import is_visible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountResult:
    """Count of the current text and how much of the limit is left."""

    count: int
    remaining: int


@dataclass(frozen=True)
class Feedback:
    """Everything published for one recount."""

    result: CountResult
    message: Message
    visible: bool


Subscriber = Callable[[CountResult, Message, bool], None]


class StatusSink(ABC):
    """Visual status line. Receives every update."""

    @abstractmethod
    def show(self, message: Message, visible: bool) -> None:
        pass


class AnnouncementSink(ABC):
    """
    Accessibility live region.

    Always receives the latest message text. When announce is False the
    region should stay silent, but it already holds the text so it can be
    announced without delay once feedback becomes visible.
    """

    @abstractmethod
    def update(self, message: Message, announce: bool) -> None:
        pass


class FeedbackPublisher:
    """Computes feedback for a text and delivers it to sinks and subscribers."""

    def __init__(
        self,
        policy: CountPolicy,
        status_sink: Optional[StatusSink] = None,
        announcement_sink: Optional[AnnouncementSink] = None,
        subscribers: Optional[Callable[[], Iterable[Subscriber]]] = None,
    ):
        """
        Initialize publisher.

        Args:
            policy: Count policy of the bound field
            status_sink: Visual status sink (optional)
            announcement_sink: Live region sink (optional)
            subscribers: Callable returning the current subscribers
        """
        self.policy = policy
        self.status_sink = status_sink
        self.announcement_sink = announcement_sink
        self._subscribers = subscribers or (lambda: ())
        self.last_feedback: Optional[Feedback] = None

    def compute(self, text: str) -> Optional[Feedback]:
        """Compute feedback for text, or None when the field is unlimited."""
        if not self.policy.is_limited:
            return None

        current = count(text, self.policy.mode)
        remaining = self.policy.limit - current
        return Feedback(
            result=CountResult(count=current, remaining=remaining),
            message=format_message(remaining, self.policy.unit),
            visible=is_visible(current, self.policy.limit, self.policy.threshold),
        )

    def publish(self, text: str) -> Optional[Feedback]:
        """
        Recount text and deliver the feedback.

        Args:
            text: Current value of the field

        Returns:
            The published Feedback, or None when the field is unlimited
        """
        feedback = self.compute(text)
        if feedback is None:
            return None

        self.last_feedback = feedback
        message, visible = feedback.message, feedback.visible

        if self.status_sink is not None:
            self._deliver("status sink", self.status_sink.show, message, visible)
        if self.announcement_sink is not None:
            self._deliver("announcement sink", self.announcement_sink.update, message, visible)
        for subscriber in list(self._subscribers()):
            self._deliver("subscriber", subscriber, feedback.result, message, visible)

        logger.debug(
            f"Published count={feedback.result.count} remaining={feedback.result.remaining} "
            f"visible={visible}"
        )
        return feedback

    @staticmethod
    def _deliver(target: str, func: Callable, *args) -> None:
        # One broken consumer must not starve the others
        try:
            func(*args)
        except Exception:
            logger.exception(f"Feedback delivery to {target} failed")
