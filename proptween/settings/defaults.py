"""
Process-wide transition defaults.

Seeded from proptween.constants.timing and overridable through environment
variables (read once at import) or set_defaults() at runtime:

    PROPTWEEN_DELAY_MS
    PROPTWEEN_DURATION_MS
    PROPTWEEN_SYNC_MAX_ITERATIONS
    PROPTWEEN_DRIVER_FPS
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from proptween.constants.timing import (
    DEFAULT_DELAY_MS,
    DEFAULT_DRIVER_FPS,
    DEFAULT_DURATION_MS,
    DEFAULT_SYNC_MAX_ITERATIONS,
)
from proptween.errors import ConfigurationError
from proptween.logging.logger import get_logger
from proptween.logging.tags import TAG_FALLBACK

logger = get_logger(__name__)

ENV_PREFIX = "PROPTWEEN_"


@dataclass(frozen=True)
class TransitionDefaults:
    """Values every new transition and driver starts from."""
    delay: float = DEFAULT_DELAY_MS
    duration: float = DEFAULT_DURATION_MS
    sync_max_iterations: int = DEFAULT_SYNC_MAX_ITERATIONS
    driver_fps: int = DEFAULT_DRIVER_FPS

    def __post_init__(self):
        validate_delay(self.delay)
        validate_duration(self.duration)
        validate_max_iterations(self.sync_max_iterations)
        if not isinstance(self.driver_fps, int) or self.driver_fps <= 0:
            raise ConfigurationError(f"driver_fps must be a positive integer, got {self.driver_fps!r}")


def validate_delay(delay: Any) -> float:
    """Return delay as a float or raise ConfigurationError."""
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise ConfigurationError(f"delay must be a number of milliseconds, got {delay!r}")
    if not math.isfinite(delay) or delay < 0:
        raise ConfigurationError(f"delay must be finite and >= 0, got {delay!r}")
    return float(delay)


def validate_duration(duration: Any) -> float:
    """Return duration as a float or raise ConfigurationError."""
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise ConfigurationError(f"duration must be a number of milliseconds, got {duration!r}")
    if not math.isfinite(duration) or duration <= 0:
        raise ConfigurationError(f"duration must be finite and > 0, got {duration!r}")
    return float(duration)


def validate_max_iterations(max_iterations: Any) -> int:
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations <= 0:
        raise ConfigurationError(
            f"max_iterations must be a positive integer, got {max_iterations!r}"
        )
    return max_iterations


def _env_number(name: str, cast) -> Optional[Any]:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("%s Ignoring %s%s=%r (not a number)", TAG_FALLBACK, ENV_PREFIX, name, raw)
        return None


def load_defaults() -> TransitionDefaults:
    """Build defaults from constants, applying valid environment overrides."""
    defaults = TransitionDefaults()
    overrides = {
        "delay": _env_number("DELAY_MS", float),
        "duration": _env_number("DURATION_MS", float),
        "sync_max_iterations": _env_number("SYNC_MAX_ITERATIONS", int),
        "driver_fps": _env_number("DRIVER_FPS", int),
    }
    for key, value in overrides.items():
        if value is None:
            continue
        try:
            defaults = replace(defaults, **{key: value})
        except ConfigurationError as e:
            logger.warning("%s Ignoring environment override for %s: %s", TAG_FALLBACK, key, e)
    return defaults


_defaults: TransitionDefaults = load_defaults()


def get_defaults() -> TransitionDefaults:
    """Return the current process-wide defaults."""
    return _defaults


def set_defaults(**overrides: Any) -> TransitionDefaults:
    """
    Replace selected process-wide defaults.

    Args:
        **overrides: Any of delay, duration, sync_max_iterations, driver_fps.

    Returns:
        The new defaults.

    Raises:
        ConfigurationError: On unknown keys or invalid values. The previous
            defaults stay in effect.
    """
    global _defaults
    known = {f.name for f in fields(TransitionDefaults)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError(f"Unknown default(s): {', '.join(sorted(unknown))}")
    _defaults = replace(_defaults, **overrides)
    logger.debug("Transition defaults updated: %s", _defaults)
    return _defaults


def reset_defaults() -> TransitionDefaults:
    """Restore defaults from constants and environment."""
    global _defaults
    _defaults = load_defaults()
    return _defaults
