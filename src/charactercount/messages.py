"""
Count message formatting.

Turns a signed remaining count into the user-facing feedback message, and
formats the static hint shown before the live counter takes over.
"""

from dataclasses import dataclass

from .constants import UNIT_CHARACTER, UNIT_WORD

UNITS = (UNIT_CHARACTER, UNIT_WORD)


@dataclass(frozen=True)
class Message:
    """Feedback message for a count."""

    text: str
    is_over_limit: bool


def pluralize(singular: str, count: int) -> str:
    """Return singular or plural form based on count."""
    if count == 1:
        return singular
    return f"{singular}s"


def _check_unit(unit: str) -> None:
    if unit not in UNITS:
        raise ValueError(f"Unknown unit: {unit!r} (expected one of {UNITS})")


def format_message(remaining: int, unit: str) -> Message:
    """
    Format the remaining/over-limit message.

    The noun is pluralized on the absolute remaining count, so both
    "1 character remaining" and "1 character too many" are singular, and
    0 is plural.

    Args:
        remaining: limit - count (negative when over the limit)
        unit: "character" or "word"

    Returns:
        Message with text and over-limit flag
    """
    _check_unit(unit)
    amount = abs(remaining)
    noun = pluralize(unit, amount)

    if remaining < 0:
        return Message(text=f"You have {amount} {noun} too many", is_over_limit=True)
    return Message(text=f"You have {amount} {noun} remaining", is_over_limit=False)


def format_fallback_hint(limit: int, unit: str) -> str:
    """Return the static hint, e.g. "You can enter up to 200 characters"."""
    _check_unit(unit)
    return f"You can enter up to {limit} {pluralize(unit, limit)}"
