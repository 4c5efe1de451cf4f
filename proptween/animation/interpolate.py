"""
Value interpolation for transitions.

interpolate(a, b) returns a function of eased progress ``t`` producing a
value between ``a`` (t=0) and ``b`` (t=1). The concrete interpolator is
picked from a registry of factories, newest first; each factory inspects
the pair and returns an interpolator or None. Progress is not clamped, so
overshooting curves (back, elastic) extrapolate past the end points.

Built-in factories, in order of precedence:
    colors      QColor values or strings Qt parses as a color
    strings     numbers embedded in text are interpolated in place
    arrays      numpy arrays, element-wise
    sequences   lists and tuples, element-wise
    mappings    dicts, key-wise
    numbers     int / float
Anything else holds the end value constant.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from numbers import Real
from typing import Any, Callable, List, Optional

import numpy as np
from PySide6.QtGui import QColor

from proptween.animation.types import Interpolator
from proptween.logging.logger import get_logger

logger = get_logger(__name__)

InterpolatorFactory = Callable[[Any, Any], Optional[Interpolator]]

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def interpolate_number(a: Any, b: Any) -> Interpolator:
    """Numeric interpolation; a missing start value counts as 0."""
    start = 0.0 if a is None else float(a)
    end = float(b)

    def number(t: float) -> float:
        return start * (1 - t) + end * t
    return number


def _numbers(a: Any, b: Any) -> Optional[Interpolator]:
    if not _is_number(b) or isinstance(a, bool):
        return None
    try:
        return interpolate_number(a, b)
    except (TypeError, ValueError):
        return None


def _arrays(a: Any, b: Any) -> Optional[Interpolator]:
    if not isinstance(b, np.ndarray):
        return None
    end = b.astype(float)
    start = np.zeros_like(end) if a is None else np.asarray(a, dtype=float)
    start, end = np.broadcast_arrays(start, end)
    start = start.copy()
    end = end.copy()

    def array(t: float) -> np.ndarray:
        return start * (1 - t) + end * t
    return array


def _to_color(value: Any) -> Optional[QColor]:
    if isinstance(value, QColor):
        return QColor(value)
    if isinstance(value, str) and value.strip():
        color = QColor(value.strip())
        if color.isValid():
            return color
    return None


def _colors(a: Any, b: Any) -> Optional[Interpolator]:
    end = _to_color(b)
    if end is None:
        return None
    start = _to_color(a)
    if start is None:
        if a is not None and not (isinstance(a, str) and not a.strip()):
            return None
        # Unset start fades from transparent end color
        start = QColor(end)
        start.setAlpha(0)
    as_string = isinstance(b, str)
    channels_a = start.getRgb()
    channels_b = end.getRgb()

    def color(t: float) -> Any:
        values = [
            max(0, min(255, round(ca * (1 - t) + cb * t)))
            for ca, cb in zip(channels_a, channels_b)
        ]
        result = QColor(*values)
        return result.name() if as_string else result
    return color


def _strings(a: Any, b: Any) -> Optional[Interpolator]:
    if not isinstance(b, str):
        return None
    text_a = "" if a is None else str(a)
    numbers_a = _NUMBER_RE.findall(text_a)
    pieces: List[Any] = []
    last = 0
    index = 0
    for match in _NUMBER_RE.finditer(b):
        if match.start() > last:
            pieces.append(b[last:match.start()])
        if index < len(numbers_a):
            pieces.append(interpolate_number(float(numbers_a[index]), float(match.group())))
        else:
            pieces.append(match.group())
        index += 1
        last = match.end()
    if last < len(b):
        pieces.append(b[last:])

    if not any(callable(p) for p in pieces):
        return lambda t: b

    def string(t: float) -> str:
        out = []
        for piece in pieces:
            if callable(piece):
                out.append(_format_number(piece(t)))
            else:
                out.append(piece)
        return "".join(out)
    return string


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(round(value, 6))


def _sequences(a: Any, b: Any) -> Optional[Interpolator]:
    if not isinstance(b, (list, tuple)):
        return None
    start = list(a) if isinstance(a, (list, tuple)) else []
    shared = min(len(start), len(b))
    parts = [interpolate(start[i], b[i]) for i in range(shared)]
    tail = list(b[shared:])
    kind = type(b)

    def sequence(t: float) -> Any:
        values = [p(t) for p in parts] + tail
        return values if kind is list else kind(values)
    return sequence


def _mappings(a: Any, b: Any) -> Optional[Interpolator]:
    if not isinstance(b, Mapping):
        return None
    start = a if isinstance(a, Mapping) else {}
    parts = {k: interpolate(start[k], v) for k, v in b.items() if k in start}
    constants = {k: v for k, v in b.items() if k not in start}

    def mapping(t: float) -> dict:
        values = {k: p(t) for k, p in parts.items()}
        values.update(constants)
        return values
    return mapping


def _constant(a: Any, b: Any) -> Interpolator:
    return lambda t: b


# Consulted last-to-first so later registrations take precedence.
INTERPOLATORS: List[InterpolatorFactory] = [
    _numbers,
    _mappings,
    _sequences,
    _arrays,
    _strings,
    _colors,
]


def register_interpolator(factory: InterpolatorFactory) -> None:
    """
    Register an interpolator factory ahead of all existing ones.

    Args:
        factory: Called with ``(a, b)``; returns an interpolator or None to
            defer to older factories.
    """
    if not callable(factory):
        raise TypeError("Interpolator factory must be callable")
    INTERPOLATORS.append(factory)


def unregister_interpolator(factory: InterpolatorFactory) -> bool:
    """Remove a previously registered factory. Returns True if it was found."""
    try:
        INTERPOLATORS.remove(factory)
        return True
    except ValueError:
        return False


def interpolate(a: Any, b: Any) -> Interpolator:
    """
    Build an interpolator from ``a`` to ``b``.

    Args:
        a: Start value (may be None when the property was unset)
        b: End value; its type selects the interpolator

    Returns:
        Function of eased progress returning the intermediate value
    """
    for factory in reversed(INTERPOLATORS):
        interpolator = factory(a, b)
        if interpolator is not None:
            return interpolator
    logger.debug("No interpolator for %s -> %s, holding end value",
                 type(a).__name__, type(b).__name__)
    return _constant(a, b)
