"""
Example: Character count feedback with a dictated edit

Binds an in-memory field with a 40 character limit and a 50% threshold,
types into it, then changes the value the way dictation software does
(no edit notification) and waits for the reconciler to pick it up.
"""

import sys
import os
import time
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from charactercount import (
    AnnouncementSink,
    CharacterCountEngine,
    InMemoryTextSource,
    Settings,
    StatusSink,
)


def print_section(title):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


class PrintStatus(StatusSink):
    def show(self, message, visible):
        state = "visible" if visible else "hidden"
        print(f"  status   [{state:>7}] {message.text}")


class PrintLiveRegion(AnnouncementSink):
    def update(self, message, announce):
        if announce:
            print(f"  announce            {message.text}")


def main():
    # Short poll so the demo finishes quickly
    engine = CharacterCountEngine(settings=Settings(poll_interval_ms=200, debounce_ms=100))
    field = InMemoryTextSource()

    print_section("Binding field (maxlength=40, threshold=50)")
    handle = engine.bind(
        field, {"maxlength": 40, "threshold": 50},
        status_sink=PrintStatus(), announcement_sink=PrintLiveRegion(),
    )
    print(f"  hint: {handle.fallback_hint}")

    print_section("Typing")
    field.focus()
    for text in ["Dear team,", "Dear team, the release", "Dear team, the release is ready"]:
        field.type(text)

    print_section("Dictation (value changes without an edit event)")
    field.set_value_silently("Dear team, the release is ready to ship tomorrow morning")
    time.sleep(0.5)

    field.blur()
    engine.unbind(handle)
    print(f"\n  final: {handle.result.count} characters, over limit: {handle.message.is_over_limit}")


if __name__ == "__main__":
    main()
