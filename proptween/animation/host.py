"""
Host object model.

Transitions only need targets that can ``get(key)`` and ``set(key, value)``
and somewhere to keep a per-target TransitionSlot. Targets that expose a
``transition_slot`` attribute (ObservableObject does) carry their own slot;
any other target gets one from a registry keyed by object identity, whose
entry is dropped when the target is garbage collected.
"""
from __future__ import annotations

import weakref
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from proptween.errors import CapabilityError
from proptween.logging.logger import get_logger
from proptween.logging.tags import TAG_TRANSITION

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from proptween.animation.drivers import TickDriver
    from proptween.animation.transition import Transition

logger = get_logger(__name__)

_MISSING = object()


class TransitionSlot:
    """Per-target record of the active transition and every registered one."""

    def __init__(self):
        self.active: Optional["Transition"] = None
        self.registered: "weakref.WeakSet[Transition]" = weakref.WeakSet()

    def release(self, transition: "Transition") -> bool:
        """Clear ``active`` if it still references ``transition``."""
        if self.active is transition:
            self.active = None
            return True
        return False


# Keyed by id() so equal-but-distinct and unhashable targets get their own
# slot; a weakref.finalize per target removes its entry.
_SLOTS: Dict[int, TransitionSlot] = {}


def _has_capabilities(obj: Any) -> bool:
    return callable(getattr(obj, "get", None)) and callable(getattr(obj, "set", None))


def ensure_target(obj: Any) -> Any:
    """
    Check that ``obj`` can be animated.

    Raises:
        CapabilityError: If ``obj`` lacks a callable get or set.
    """
    if obj is None or not _has_capabilities(obj):
        raise CapabilityError(
            f"{type(obj).__name__} does not provide callable get(key) / set(key, value)"
        )
    return obj


class MappingTarget:
    """Adapts a mutable mapping to the get/set capability."""

    __slots__ = ("mapping",)

    def __init__(self, mapping: MutableMapping):
        self.mapping = mapping

    def get(self, key: Any) -> Any:
        return self.mapping.get(key)

    def set(self, key: Any, value: Any) -> None:
        self.mapping[key] = value

    def __repr__(self) -> str:
        return f"MappingTarget({self.mapping!r})"


def as_target(obj: Any) -> Any:
    """Return ``obj`` as a get/set target, wrapping mutable mappings."""
    if obj is not None and _has_capabilities(obj):
        return obj
    if isinstance(obj, MutableMapping):
        return MappingTarget(obj)
    raise CapabilityError(
        f"{type(obj).__name__} is neither a get/set object nor a mutable mapping"
    )


def slot_for(target: Any) -> TransitionSlot:
    """
    Return the TransitionSlot of ``target``, creating it on first use.

    Raises:
        CapabilityError: If the target can neither carry a slot nor be
            weakly referenced.
    """
    slot = getattr(target, "transition_slot", None)
    if isinstance(slot, TransitionSlot):
        return slot
    key = id(target)
    slot = _SLOTS.get(key)
    if slot is not None:
        return slot
    slot = TransitionSlot()
    try:
        weakref.finalize(target, _SLOTS.pop, key, None)
    except TypeError as e:
        raise CapabilityError(
            f"{type(target).__name__} cannot hold a transition slot: {e}"
        ) from e
    _SLOTS[key] = slot
    return slot


def active_transition(target: Any) -> Optional["Transition"]:
    """The transition currently allowed to write ``target``'s properties."""
    return slot_for(target).active


def transitions_for(target: Any) -> List["Transition"]:
    """Every live transition created against ``target``, oldest first."""
    return sorted(slot_for(target).registered, key=lambda t: t.serial)


def stop_transitions(target: Any) -> int:
    """Stop every non-terminal transition on ``target``. Returns how many were stopped."""
    stopped = 0
    for transition in transitions_for(target):
        if not transition.is_terminal() and not transition.killed:
            transition.stop()
            stopped += 1
    if stopped:
        logger.debug("%s Stopped %d transition(s) on %r", TAG_TRANSITION, stopped, target)
    return stopped


def _differs(old: Any, new: Any) -> bool:
    if old is new:
        return False
    try:
        return bool(old != new)
    except (TypeError, ValueError):
        # Element-wise comparisons (numpy arrays) have no single truth value
        return True


class ObservableObject(QObject):
    """
    Property bag that reports changes through a Qt signal.

    Example:
        ball = ObservableObject(x=0, color="#ff0000")
        ball.property_changed.connect(on_change)
        ball.transition(duration=250).ease("quad-out").set("x", 100)
    """

    # Signal emitted when a property changes
    property_changed = Signal(str, object)  # key, new_value

    def __init__(self, properties: Optional[Mapping[str, Any]] = None,
                 parent: Optional[QObject] = None, **values: Any):
        super().__init__(parent)
        self._properties: Dict[str, Any] = dict(properties or {})
        self._properties.update(values)
        self.transition_slot = TransitionSlot()

    def get(self, key: str, default: Any = None) -> Any:
        return self._properties.get(key, default)

    def set(self, key: str, value: Any) -> None:
        old = self._properties.get(key, _MISSING)
        self._properties[key] = value
        if old is _MISSING or _differs(old, value):
            self.property_changed.emit(key, value)

    def set_properties(self, **values: Any) -> None:
        for key, value in values.items():
            self.set(key, value)

    def properties(self) -> Dict[str, Any]:
        """Shallow copy of all properties."""
        return dict(self._properties)

    def __contains__(self, key: str) -> bool:
        return key in self._properties

    def transition(self, config: Optional[Mapping[str, Any]] = None, *,
                   driver: Optional["TickDriver"] = None, **options: Any) -> "Transition":
        """Create a transition bound to this object (see create_transition)."""
        from proptween.animation.transition import create_transition
        from proptween.animation.types import resolve_config

        if config is not None and options:
            config = {**vars(resolve_config(config)), **options}
        return create_transition(self, config if config is not None else (options or None),
                                 driver=driver)

    def __repr__(self) -> str:
        return f"ObservableObject({self._properties!r})"
