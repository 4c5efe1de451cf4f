"""
Transition types, enums, and dataclasses.

Defines the value objects shared by the transition engine, its drivers and
the host object model.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Protocol, Union, runtime_checkable

from proptween.errors import ConfigurationError
from proptween.settings.defaults import get_defaults, validate_delay, validate_duration


class TransitionState(Enum):
    """State of a transition."""
    PENDING = "pending"        # Created, waiting for its execution step
    ACTIVE = "active"          # Occupies the target's slot and is ticking
    COMPLETED = "completed"    # Reached completion >= 1
    KILLED = "killed"          # Stopped or superseded


TERMINAL_STATES = frozenset({TransitionState.COMPLETED, TransitionState.KILLED})


@runtime_checkable
class TransitionTarget(Protocol):
    """Anything whose properties can be read and written by key."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> Any: ...


@dataclass
class TransitionConfig:
    """Timing configuration for a single transition (milliseconds)."""
    delay: float = field(default_factory=lambda: get_defaults().delay)
    duration: float = field(default_factory=lambda: get_defaults().duration)

    def __post_init__(self):
        self.delay = validate_delay(self.delay)
        self.duration = validate_duration(self.duration)

    @classmethod
    def from_defaults(cls) -> "TransitionConfig":
        return cls()


ConfigLike = Union[TransitionConfig, Mapping[str, Any], None]


def resolve_config(config: ConfigLike = None) -> TransitionConfig:
    """
    Build a per-instance config.

    Args:
        config: None for process-wide defaults, a TransitionConfig (copied),
            or a mapping with any of ``delay`` / ``duration``.

    Returns:
        A fresh TransitionConfig owned by the caller.
    """
    if config is None:
        return TransitionConfig.from_defaults()
    if isinstance(config, TransitionConfig):
        return TransitionConfig(delay=config.delay, duration=config.duration)
    unknown = set(config) - {"delay", "duration"}
    if unknown:
        raise ConfigurationError(f"Unknown transition option(s): {', '.join(sorted(unknown))}")
    return TransitionConfig(**dict(config))


Interpolator = Callable[[float], Any]
Easer = Callable[[float], float]
TickCallback = Callable[[float], bool]


@dataclass(frozen=True)
class SetRecord:
    """One scheduled property mutation, fixed at the time set() was called."""
    target: Any
    key: str
    old_value: Any
    new_value: Any
    interpolator: Interpolator

    def apply(self, t: float) -> None:
        """Write the interpolated value for eased progress ``t``."""
        self.target.set(self.key, self.value_at(t))

    def value_at(self, t: float) -> Any:
        return self.interpolator(t)


# Type aliases for callbacks
ValueResolver = Callable[[Any], Any]                # old value -> new value
ElementValueFn = Callable[[Any, int], Any]          # (element, index) -> new value
