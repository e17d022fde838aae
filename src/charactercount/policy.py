"""
Count policy normalization.

Turns the bind options of a counted field (maxlength, maxwords, threshold)
into a CountPolicy. When maxwords is configured the field counts words and
any maxlength is ignored entirely.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .constants import (
    BIND_OPTIONS,
    DEFAULT_THRESHOLD,
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    MODE_CHARACTERS,
    MODE_UNITS,
    MODE_WORDS,
    OPTION_MAXLENGTH,
    OPTION_MAXWORDS,
    OPTION_THRESHOLD,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountPolicy:
    """
    How a bound field is counted.

    Attributes:
        mode: MODE_CHARACTERS or MODE_WORDS
        limit: Maximum count, or None when the field is unlimited
        threshold: Percentage of the limit at which feedback becomes visible
    """

    mode: str = MODE_CHARACTERS
    limit: Optional[int] = None
    threshold: int = DEFAULT_THRESHOLD

    @property
    def unit(self) -> str:
        return MODE_UNITS[self.mode]

    @property
    def is_limited(self) -> bool:
        return self.limit is not None


def _coerce_int(option: str, value: Any) -> Optional[int]:
    """Accept ints and integer strings (as found in data-* attributes)."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(option, value, "expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == "":
            return None
        try:
            return int(stripped)
        except ValueError:
            raise ConfigurationError(option, value, "expected an integer")
    raise ConfigurationError(option, value, f"expected an integer, got {type(value).__name__}")


def _limit_or_unlimited(option: str, value: Optional[int]) -> Optional[int]:
    if value is not None and value <= 0:
        logger.debug(f"Non-positive {option}={value} treated as unlimited")
        return None
    return value


def policy_from_options(
    options: Optional[Mapping[str, Any]] = None,
    default_threshold: int = DEFAULT_THRESHOLD,
    **kwargs: Any
) -> CountPolicy:
    """
    Build a CountPolicy from bind options.

    Args:
        options: Mapping with any of maxlength, maxwords, threshold
        default_threshold: Threshold used when none is configured
        **kwargs: Options given as keywords (override the mapping)

    Returns:
        Normalized CountPolicy

    Raises:
        ConfigurationError: If an option is unknown or malformed
    """
    merged = dict(options or {})
    merged.update(kwargs)

    unknown = sorted(set(merged) - set(BIND_OPTIONS))
    if unknown:
        raise ConfigurationError(
            unknown[0], merged[unknown[0]],
            f"unknown option (expected one of {', '.join(BIND_OPTIONS)})"
        )

    maxlength = _coerce_int(OPTION_MAXLENGTH, merged.get(OPTION_MAXLENGTH))
    maxwords = _coerce_int(OPTION_MAXWORDS, merged.get(OPTION_MAXWORDS))
    threshold = _coerce_int(OPTION_THRESHOLD, merged.get(OPTION_THRESHOLD))

    if threshold is None:
        threshold = default_threshold
    if not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD:
        raise ConfigurationError(
            OPTION_THRESHOLD, threshold,
            f"must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}"
        )

    if maxwords is not None:
        return CountPolicy(
            mode=MODE_WORDS,
            limit=_limit_or_unlimited(OPTION_MAXWORDS, maxwords),
            threshold=threshold,
        )

    return CountPolicy(
        mode=MODE_CHARACTERS,
        limit=_limit_or_unlimited(OPTION_MAXLENGTH, maxlength),
        threshold=threshold,
    )
