"""
Property transitions.

A Transition collects SetRecords for one target and drives all of them as a
single tick sequence:

    t = create_transition(ball, {"duration": 250}).ease("quad-out")
    t.set("x", 100).set("y", lambda y: y + 40)
    t.each("trail").set("alpha", lambda dot, i: 1.0 / (i + 1))

Every set() made in one synchronous burst lands in the same run: set()
snapshots old/new values immediately and re-arms a zero-delay Debouncer,
whose single firing calls execute_timer(). Starting a transition stops
whatever transition was active on the same target; the stopped one sees its
``killed`` flag on its next tick, may write once more, and then ends.
"""
from __future__ import annotations

import itertools
from functools import partial
from typing import Any, Callable, List, Optional, Set

from PySide6.QtCore import QObject, Signal

from proptween.animation import easing
from proptween.animation.debounce import Debouncer
from proptween.animation.drivers import TickDriver, get_default_driver
from proptween.animation.host import as_target, ensure_target, slot_for
from proptween.animation.interpolate import interpolate
from proptween.animation.types import (
    TERMINAL_STATES,
    ConfigLike,
    Easer,
    ElementValueFn,
    SetRecord,
    TransitionState,
    ValueResolver,
    resolve_config,
)
from proptween.errors import ConfigurationError, TransitionAlreadyStoppedError
from proptween.logging.logger import get_logger, is_verbose_logging
from proptween.logging.tags import TAG_FANOUT, TAG_TRANSITION
from proptween.settings.defaults import validate_delay, validate_duration

logger = get_logger(__name__)

# Transitions waiting for their debounced execution. Keeps them alive when
# callers drop their reference right after set(), the way a running driver
# keeps an active transition alive through its tick callback.
_SCHEDULED: Set["Transition"] = set()


def _constant(value: Any) -> ValueResolver:
    return lambda old_value: value


def _element_value(fn: ElementValueFn, element: Any, index: int, old_value: Any) -> Any:
    return fn(element, index)


class Transition(QObject):
    """
    Tweens properties of one target over a shared tick sequence.

    Signals:
    - started: The transition took the target's slot and began ticking
    - completed: Completion reached 1
    - cancelled: Stopped before completion (explicitly or superseded)
    """

    started = Signal()
    completed = Signal()
    cancelled = Signal()

    _serials = itertools.count(1)

    def __init__(self, target: Any, config: ConfigLike = None,
                 driver: Optional[TickDriver] = None, parent: Optional[QObject] = None):
        """
        Initialize a transition.

        Args:
            target: Object exposing get(key) / set(key, value)
            config: None, a TransitionConfig, or a mapping with delay/duration
            driver: Tick driver; the process-wide default when None
            parent: Optional Qt parent

        Raises:
            CapabilityError: If the target cannot be animated
            ConfigurationError: If the configuration is invalid
        """
        super().__init__(parent)

        if driver is not None and not isinstance(driver, TickDriver):
            raise TypeError(f"Expected a TickDriver, got {type(driver).__name__}")

        self.target = ensure_target(target)
        self._slot = slot_for(target)
        self.config = resolve_config(config)
        self.sets: List[SetRecord] = []
        self.easer: Optional[Easer] = None
        self.killed = False
        self.state = TransitionState.PENDING
        self.serial = next(Transition._serials)

        self._driver = driver
        self._debouncer: Optional[Debouncer] = None

        self._slot.registered.add(self)
        logger.debug("%s Transition #%d created (delay=%sms, duration=%sms)",
                     TAG_TRANSITION, self.serial, self.config.delay, self.config.duration)

    @property
    def driver(self) -> TickDriver:
        return self._driver if self._driver is not None else get_default_driver()

    # Configuration -----------------------------------------------------

    def delay(self, ms: float) -> "Transition":
        """Set the delay before the first tick (milliseconds)."""
        self.config.delay = validate_delay(ms)
        return self

    def duration(self, ms: float) -> "Transition":
        """Set how long the transition takes (milliseconds)."""
        self.config.duration = validate_duration(ms)
        return self

    def ease(self, name: Optional[str] = None, a: Optional[float] = None,
             b: Optional[float] = None) -> "Transition":
        """
        Use a named easing curve.

        Args:
            name: Easing name, defaults to "cubic-in-out"
            a: First curve parameter (defaults to 1 where required)
            b: Second curve parameter (defaults to 0.4 where required)

        Raises:
            ConfigurationError: On unknown names or invalid parameters
        """
        self.easer = easing.ease(name, a, b)
        return self

    def ease_with(self, fn: Easer) -> "Transition":
        """Use an arbitrary easing callable (not clamped)."""
        if not callable(fn):
            raise ConfigurationError("Easing function must be callable")
        self.easer = fn
        return self

    # Scheduling --------------------------------------------------------

    def set(self, key: str, value: Any) -> "Transition":
        """
        Schedule ``key`` to tween to ``value``.

        Args:
            key: Property on the target
            value: End value, or a callable mapping the current value to it

        Raises:
            TransitionAlreadyStoppedError: If the transition was stopped or finished
        """
        resolve = value if callable(value) else _constant(value)
        self._inner_set(self.target, key, resolve)
        self.execute()
        return self

    def each(self, collection_key: str) -> "ArrayTransition":
        """Fan out the next set() over every element of a collection property."""
        return ArrayTransition(self, collection_key)

    def _ensure_open(self) -> None:
        if self.killed or self.state in TERMINAL_STATES:
            raise TransitionAlreadyStoppedError(
                f"Transition #{self.serial} is {self.state.value}"
                f"{' (killed)' if self.killed else ''}; no further set() calls are accepted"
            )

    def _inner_set(self, target: Any, key: str, resolve: ValueResolver) -> SetRecord:
        self._ensure_open()
        old_value = target.get(key)
        new_value = resolve(old_value)
        record = SetRecord(target, key, old_value, new_value, interpolate(old_value, new_value))
        self.sets.append(record)
        if is_verbose_logging():
            logger.debug("%s Transition #%d set %r: %r -> %r",
                         TAG_TRANSITION, self.serial, key, old_value, new_value)
        return record

    def execute(self) -> None:
        """
        Schedule execute_timer() for the next event-loop pass.

        Repeated calls before it fires replace the pending call. No-op when
        the driver runs synchronously, and once the transition has started
        (the running sequence applies newly added records from its next tick).
        """
        if self.killed or self.state is not TransitionState.PENDING:
            return
        if not self.driver.defers_execution:
            return
        if self._debouncer is None:
            self._debouncer = Debouncer(self.execute_timer)
        self._debouncer.trigger()
        _SCHEDULED.add(self)

    def execute_timer(self) -> bool:
        """
        Take over the target's slot and start ticking.

        Returns:
            True if the tick sequence was started
        """
        if self.killed or self.state is not TransitionState.PENDING:
            logger.debug("%s Transition #%d not started (state=%s, killed=%s)",
                         TAG_TRANSITION, self.serial, self.state.value, self.killed)
            return False
        self._cancel_pending()

        previous = self._slot.active
        if previous is not None and previous is not self:
            previous.stop()
            self._slot.release(previous)
            logger.debug("%s Transition #%d supersedes #%d",
                         TAG_TRANSITION, self.serial, previous.serial)
        self._slot.active = self
        self.state = TransitionState.ACTIVE

        logger.debug("%s Transition #%d started (%d record(s))",
                     TAG_TRANSITION, self.serial, len(self.sets))
        self.started.emit()
        self.driver.timer(self.tick, self.config.delay)
        return True

    # Ticking -----------------------------------------------------------

    def tick(self, elapsed_ms: float) -> bool:
        """
        Apply every record for ``elapsed_ms`` since the start.

        Without an easer, completion is used as-is, so the last real-time
        frame may land slightly past the end values (elapsed > duration).
        Named easings clamp it to 1. If a record fails to apply, the
        transition is killed and the exception propagates to the driver.

        Returns:
            True once the transition is finished (completed or killed)
        """
        if self.state in TERMINAL_STATES:
            return True

        completion = elapsed_ms / self.config.duration
        t = self.easer(completion) if self.easer is not None else completion
        try:
            for record in list(self.sets):
                record.apply(t)
        except Exception:
            self.killed = True
            self._finish()
            raise

        if completion >= 1 or self.killed:
            self._finish()
            return True
        return False

    def stop(self) -> None:
        """
        Stop the transition. Idempotent.

        A pending transition ends immediately; an active one ends on its
        next tick. Properties keep whatever value was last written.
        """
        if self.killed or self.state in TERMINAL_STATES:
            return
        self.killed = True
        if self.state is TransitionState.PENDING:
            self._finish()

    def _cancel_pending(self) -> None:
        if self._debouncer is not None:
            self._debouncer.cancel()
        _SCHEDULED.discard(self)

    def _finish(self) -> None:
        self._cancel_pending()
        self._slot.release(self)
        if self.killed:
            self.state = TransitionState.KILLED
            logger.debug("%s Transition #%d killed", TAG_TRANSITION, self.serial)
            self.cancelled.emit()
        else:
            self.state = TransitionState.COMPLETED
            logger.debug("%s Transition #%d completed", TAG_TRANSITION, self.serial)
            self.completed.emit()

    # Introspection -----------------------------------------------------

    def is_active(self) -> bool:
        return self.state is TransitionState.ACTIVE

    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def is_scheduled(self) -> bool:
        """True while a debounced execution is pending."""
        return self._debouncer is not None and self._debouncer.is_pending()

    def __repr__(self) -> str:
        return (f"<Transition #{self.serial} {self.state.value} "
                f"records={len(self.sets)} killed={self.killed}>")


class ArrayTransition:
    """
    Fans a set() out over every element of a collection property.

    The collection is read from the target when set() is called, so elements
    added after each() are included. Elements may be get/set objects or
    mutable mappings. Scheduling is left entirely to the wrapped Transition.
    """

    def __init__(self, transition: Transition, collection_key: str):
        self.transition = transition
        self.collection_key = collection_key

    @property
    def target(self) -> Any:
        return self.transition.target

    def delay(self, ms: float) -> "ArrayTransition":
        self.transition.delay(ms)
        return self

    def duration(self, ms: float) -> "ArrayTransition":
        self.transition.duration(ms)
        return self

    def ease(self, name: Optional[str] = None, a: Optional[float] = None,
             b: Optional[float] = None) -> "ArrayTransition":
        self.transition.ease(name, a, b)
        return self

    def ease_with(self, fn: Callable[[float], float]) -> "ArrayTransition":
        self.transition.ease_with(fn)
        return self

    def stop(self) -> None:
        self.transition.stop()

    def set(self, key: str, value: Any) -> "ArrayTransition":
        """
        Schedule ``key`` on every element.

        Args:
            key: Property on each element
            value: End value, or a callable ``(element, index) -> end value``

        Raises:
            CapabilityError: If an element cannot be read/written
            TransitionAlreadyStoppedError: If the transition was stopped or finished
        """
        self.transition._ensure_open()
        collection = self.transition.target.get(self.collection_key)
        if collection is None:
            logger.debug("%s Collection %r is unset, nothing to fan out",
                         TAG_FANOUT, self.collection_key)
            collection = ()
        elements = list(collection)
        targets = [as_target(element) for element in elements]

        for index, (element, element_target) in enumerate(zip(elements, targets)):
            if callable(value):
                resolve = partial(_element_value, value, element, index)
            else:
                resolve = _constant(value)
            self.transition._inner_set(element_target, key, resolve)

        logger.debug("%s %r.%s fanned out over %d element(s)",
                     TAG_FANOUT, self.collection_key, key, len(elements))
        self.transition.execute()
        return self


def create_transition(target: Any, config: ConfigLike = None, *,
                      driver: Optional[TickDriver] = None) -> Transition:
    """
    Create a transition bound to ``target``.

    Args:
        target: Object exposing get(key) / set(key, value)
        config: Optional ``{"delay": ms, "duration": ms}`` override
        driver: Optional tick driver (process-wide default when None)

    Returns:
        A pending Transition
    """
    return Transition(target, config, driver=driver)
