"""
Character Count

Counting and feedback engine for character- and word-limited text fields:
counts input, decides when to show the remaining/over-limit message, formats
it, and keeps it in step with value changes that bypass edit notifications.
"""

from .constants import MODE_CHARACTERS, MODE_WORDS
from .counter import count, count_characters, count_words
from .threshold import is_visible
from .messages import Message, format_message, format_fallback_hint, pluralize
from .policy import CountPolicy, policy_from_options
from .publisher import (
    AnnouncementSink,
    CountResult,
    Feedback,
    FeedbackPublisher,
    StatusSink,
)
from .reconciler import ChangeReconciler, CountState, ReconcilerState
from .text_source import TextSource, InMemoryTextSource
from .timing import Clock, Scheduler, SystemClock, ThreadingScheduler, TimerHandle
from .engine import BindingHandle, CharacterCountEngine, evaluate
from .config import Settings, load_settings
from .errors import CharacterCountError, ConfigurationError, ValidationError

__version__ = "0.1.0"

__all__ = [
    "MODE_CHARACTERS",
    "MODE_WORDS",
    "count",
    "count_characters",
    "count_words",
    "is_visible",
    "Message",
    "format_message",
    "format_fallback_hint",
    "pluralize",
    "CountPolicy",
    "policy_from_options",
    "AnnouncementSink",
    "CountResult",
    "Feedback",
    "FeedbackPublisher",
    "StatusSink",
    "ChangeReconciler",
    "CountState",
    "ReconcilerState",
    "TextSource",
    "InMemoryTextSource",
    "Clock",
    "Scheduler",
    "SystemClock",
    "ThreadingScheduler",
    "TimerHandle",
    "BindingHandle",
    "CharacterCountEngine",
    "evaluate",
    "Settings",
    "load_settings",
    "CharacterCountError",
    "ConfigurationError",
    "ValidationError",
]
