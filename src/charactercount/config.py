"""
Runtime settings for the character count engine.

Settings are read from environment variables (a local .env file is loaded
first, if present) so timing and rate limits can be tuned per deployment
without code changes.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Mapping

from dotenv import load_dotenv  # type: ignore[import-untyped]

from .constants import (
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_THRESHOLD,
    DEFAULT_COUNT_RATE_LIMIT,
    MIN_THRESHOLD,
    MAX_THRESHOLD,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_POLL_INTERVAL = "CHARACTER_COUNT_POLL_INTERVAL_MS"
ENV_DEBOUNCE = "CHARACTER_COUNT_DEBOUNCE_MS"
ENV_DEFAULT_THRESHOLD = "CHARACTER_COUNT_DEFAULT_THRESHOLD"
ENV_RATE_LIMIT = "CHARACTER_COUNT_RATE_LIMIT"
ENV_DEBUG = "CHARACTER_COUNT_DEBUG"


@dataclass(frozen=True)
class Settings:
    """Tunable engine and service settings."""

    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    default_threshold: int = DEFAULT_THRESHOLD
    rate_limit: str = DEFAULT_COUNT_RATE_LIMIT
    ratelimit_storage_url: str = "memory://"
    debug: bool = False


def _read_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0,
              maximum: Optional[int] = None) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(name, raw, "expected an integer")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ConfigurationError(name, raw, f"must be {bounds}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env: Mapping to read from (default: os.environ after loading .env)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a numeric variable is malformed or out of range
    """
    if env is None:
        load_dotenv()
        env = os.environ

    settings = Settings(
        poll_interval_ms=_read_int(env, ENV_POLL_INTERVAL, DEFAULT_POLL_INTERVAL_MS, minimum=1),
        debounce_ms=_read_int(env, ENV_DEBOUNCE, DEFAULT_DEBOUNCE_MS),
        default_threshold=_read_int(
            env, ENV_DEFAULT_THRESHOLD, DEFAULT_THRESHOLD,
            minimum=MIN_THRESHOLD, maximum=MAX_THRESHOLD
        ),
        rate_limit=env.get(ENV_RATE_LIMIT) or DEFAULT_COUNT_RATE_LIMIT,
        ratelimit_storage_url=env.get("RATELIMIT_STORAGE_URL") or "memory://",
        debug=(
            env.get(ENV_DEBUG, "false").lower() == "true"
            or env.get("FLASK_ENV") == "development"
        ),
    )
    logger.debug(f"Loaded settings: {settings}")
    return settings
