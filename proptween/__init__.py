"""proptween - tween object properties over time on the Qt event loop."""

from proptween.animation import (
    ArrayTransition,
    ObservableObject,
    SyncTickDriver,
    QtTickDriver,
    Transition,
    TransitionState,
    create_transition,
    disable_sync_mode,
    ease,
    enable_sync_mode,
    interpolate,
    is_sync_mode,
    stop_transitions,
    sync_mode,
)
from proptween.errors import (
    CapabilityError,
    ConfigurationError,
    TransitionAlreadyStoppedError,
    TransitionError,
)

__version__ = "0.3.0"

__all__ = [
    "ArrayTransition",
    "ObservableObject",
    "SyncTickDriver",
    "QtTickDriver",
    "Transition",
    "TransitionState",
    "create_transition",
    "disable_sync_mode",
    "ease",
    "enable_sync_mode",
    "interpolate",
    "is_sync_mode",
    "stop_transitions",
    "sync_mode",
    "CapabilityError",
    "ConfigurationError",
    "TransitionAlreadyStoppedError",
    "TransitionError",
]
