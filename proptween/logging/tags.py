"""Standard logging tags for consistent log filtering.

Usage:
    from proptween.logging.tags import TAG_TRANSITION
    logger.debug(f"{TAG_TRANSITION} Transition started")
"""

# =============================================================================
# Performance and Metrics
# =============================================================================

TAG_PERF = "[PERF]"
"""Performance metrics, only emitted when perf metrics are enabled."""

TAG_TIMING = "[TIMING]"
"""Tick driver scheduling and debounce events."""

# =============================================================================
# Engine
# =============================================================================

TAG_TRANSITION = "[TRANSITION]"
"""Transition lifecycle: scheduling, start, supersession, completion."""

TAG_FANOUT = "[FANOUT]"
"""Array fan-out over collection properties."""

# =============================================================================
# Status Tags
# =============================================================================

TAG_FALLBACK = "[FALLBACK]"
"""A default was substituted for an invalid or missing value."""
