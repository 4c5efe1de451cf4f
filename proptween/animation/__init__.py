"""Property transition engine."""

from .types import (
    TransitionState,
    TransitionConfig,
    TransitionTarget,
    SetRecord,
    resolve_config,
)
from .easing import ease, get_easing_function, register_easing, EASING_FUNCTIONS, EasingMode
from .interpolate import interpolate, register_interpolator, unregister_interpolator
from .debounce import Debouncer
from .drivers import (
    TickDriver,
    QtTickDriver,
    SyncTickDriver,
    get_default_driver,
    set_default_driver,
    enable_sync_mode,
    disable_sync_mode,
    is_sync_mode,
    sync_mode,
)
from .host import (
    ObservableObject,
    MappingTarget,
    TransitionSlot,
    as_target,
    ensure_target,
    slot_for,
    active_transition,
    transitions_for,
    stop_transitions,
)
from .transition import Transition, ArrayTransition, create_transition

__all__ = [
    # Types
    'TransitionState',
    'TransitionConfig',
    'TransitionTarget',
    'SetRecord',
    'resolve_config',

    # Adapters
    'ease',
    'get_easing_function',
    'register_easing',
    'EASING_FUNCTIONS',
    'EasingMode',
    'interpolate',
    'register_interpolator',
    'unregister_interpolator',

    # Scheduling
    'Debouncer',
    'TickDriver',
    'QtTickDriver',
    'SyncTickDriver',
    'get_default_driver',
    'set_default_driver',
    'enable_sync_mode',
    'disable_sync_mode',
    'is_sync_mode',
    'sync_mode',

    # Host model
    'ObservableObject',
    'MappingTarget',
    'TransitionSlot',
    'as_target',
    'ensure_target',
    'slot_for',
    'active_transition',
    'transitions_for',
    'stop_transitions',

    # Transitions
    'Transition',
    'ArrayTransition',
    'create_transition',
]
