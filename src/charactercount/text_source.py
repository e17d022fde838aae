"""
Text source abstraction.

A TextSource is whatever holds the value being counted: a browser textarea
behind a bridge, a terminal field, or the in-memory source used by tests and
the CLI. The engine only needs to read the live value and hear about edits,
focus changes and page restoration.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EditCallback = Callable[[str], None]
EventCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


class TextSource(ABC):
    """
    Abstract interface for a counted text field.

    Every registration method returns a callable that removes the listener.
    """

    @abstractmethod
    def get_value(self) -> str:
        """Return the live value of the field."""
        pass

    @abstractmethod
    def on_edit(self, callback: EditCallback) -> Unsubscribe:
        """Register a callback receiving the new value after each edit."""
        pass

    @abstractmethod
    def on_focus(self, callback: EventCallback) -> Unsubscribe:
        pass

    @abstractmethod
    def on_blur(self, callback: EventCallback) -> Unsubscribe:
        pass

    def on_page_show(self, callback: EventCallback) -> Unsubscribe:
        """
        Register a callback for page restoration from the history cache.

        Sources that cannot be restored never fire it.
        """
        return lambda: None


class InMemoryTextSource(TextSource):
    """
    TextSource held in memory.

    Edits made through type() notify edit listeners. set_value_silently()
    changes the value the way dictation or autofill does, without an edit
    notification, so only the reconciler can notice it.
    """

    EVENTS = ("edit", "focus", "blur", "pageshow")

    def __init__(self, value: str = ""):
        self._value = value or ""
        self._focused = False
        self._listeners: Dict[str, List[Callable]] = {event: [] for event in self.EVENTS}

    def _register(self, event: str, callback: Callable) -> Unsubscribe:
        listeners = self._listeners[event]
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def _fire(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    @property
    def focused(self) -> bool:
        return self._focused

    def get_value(self) -> str:
        return self._value

    def on_edit(self, callback: EditCallback) -> Unsubscribe:
        return self._register("edit", callback)

    def on_focus(self, callback: EventCallback) -> Unsubscribe:
        return self._register("focus", callback)

    def on_blur(self, callback: EventCallback) -> Unsubscribe:
        return self._register("blur", callback)

    def on_page_show(self, callback: EventCallback) -> Unsubscribe:
        return self._register("pageshow", callback)

    def type(self, value: str) -> None:
        """Replace the value and notify edit listeners."""
        self._value = value
        self._fire("edit", value)

    def set_value_silently(self, value: str) -> None:
        """Replace the value without any notification."""
        self._value = value

    def focus(self) -> None:
        if not self._focused:
            self._focused = True
            self._fire("focus")

    def blur(self) -> None:
        if self._focused:
            self._focused = False
            self._fire("blur")

    def restore_page(self, value: Optional[str] = None) -> None:
        """Simulate a page restored from the history cache."""
        if value is not None:
            self._value = value
        logger.debug("Page restored; notifying pageshow listeners")
        self._fire("pageshow")
