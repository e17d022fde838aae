"""
Constants for the character count engine.

This module centralizes the counting modes, unit nouns and timing defaults
used by the counter, the reconciler and the feedback publisher.
"""

# Counting modes
MODE_CHARACTERS = "characters"
MODE_WORDS = "words"
COUNT_MODES = (MODE_CHARACTERS, MODE_WORDS)

# Unit nouns used in messages (singular form; plural adds "s")
UNIT_CHARACTER = "character"
UNIT_WORD = "word"
MODE_UNITS = {
    MODE_CHARACTERS: UNIT_CHARACTER,
    MODE_WORDS: UNIT_WORD,
}

# Recognized bind options
OPTION_MAXLENGTH = "maxlength"
OPTION_MAXWORDS = "maxwords"
OPTION_THRESHOLD = "threshold"
BIND_OPTIONS = (OPTION_MAXLENGTH, OPTION_MAXWORDS, OPTION_THRESHOLD)

# Threshold percentage bounds (0 = feedback visible from the first keystroke)
DEFAULT_THRESHOLD = 0
MIN_THRESHOLD = 0
MAX_THRESHOLD = 100

# Reconciliation timing (milliseconds)
# How often a focused field is polled for out-of-band value changes
DEFAULT_POLL_INTERVAL_MS = 1000

# Minimum idle time since the last edit before a poll tick may act
DEFAULT_DEBOUNCE_MS = 500

# Default rate limit for the HTTP count endpoint
DEFAULT_COUNT_RATE_LIMIT = "120 per minute"
