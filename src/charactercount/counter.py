"""
Character and word counting.

Characters are counted as UTF-16 code units, which is the length a browser
reports for a textarea value. Words are maximal runs of non-whitespace.
"""

import re

from .constants import MODE_CHARACTERS, MODE_WORDS

# ECMAScript's \s class. Python's \s differs (it matches \x1c-\x1f and \x85,
# and misses U+FEFF), so the class is spelled out.
JS_WHITESPACE = (
    "\\t\\n\\v\\f\\r \\u00a0\\u1680\\u2000-\\u200a"
    "\\u2028\\u2029\\u202f\\u205f\\u3000\\ufeff"
)
WORD_PATTERN = re.compile(f"[^{JS_WHITESPACE}]+")


def count_characters(text: str) -> int:
    """Return the number of UTF-16 code units in text."""
    if not text:
        return 0
    # Astral-plane characters take a surrogate pair
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


def count_words(text: str) -> int:
    """Return the number of whitespace-separated tokens in text."""
    if not text:
        return 0
    return sum(1 for _ in WORD_PATTERN.finditer(text))


def count(text: str, mode: str) -> int:
    """
    Count text under a counting mode.

    Args:
        text: Text to count (None counts as empty)
        mode: MODE_CHARACTERS or MODE_WORDS

    Returns:
        Count as integer

    Raises:
        ValueError: If mode is not a known counting mode
    """
    if mode == MODE_WORDS:
        return count_words(text)
    if mode == MODE_CHARACTERS:
        return count_characters(text)
    raise ValueError(f"Unknown counting mode: {mode!r}")
