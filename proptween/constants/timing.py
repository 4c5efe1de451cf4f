"""Timing constants for transitions.

All timing values are in milliseconds unless otherwise noted.
Process-wide defaults in proptween.settings.defaults are seeded from these
and may be overridden at runtime or via environment variables.
"""

# =============================================================================
# Transition Defaults
# =============================================================================

DEFAULT_DELAY_MS = 0
"""Delay before a transition's first tick."""

DEFAULT_DURATION_MS = 400
"""Default transition length."""

# =============================================================================
# Easing
# =============================================================================

DEFAULT_EASE_NAME = "cubic-in-out"
"""Curve used when Transition.ease() is called without a name."""

DEFAULT_EASE_A = 1.0
"""First easing parameter (poly exponent, elastic amplitude)."""

DEFAULT_EASE_B = 0.4
"""Second easing parameter (elastic period)."""

# =============================================================================
# Tick Drivers
# =============================================================================

DEFAULT_DRIVER_FPS = 60
"""Target tick rate of the real-time Qt driver."""

MIN_DRIVER_FPS = 10
MAX_DRIVER_FPS = 240

DEFAULT_SYNC_MAX_ITERATIONS = 100000
"""Iteration ceiling of the synchronous driver (one iteration per ms)."""

DEBOUNCE_INTERVAL_MS = 0
"""Deferred execution runs on the next event-loop pass."""
