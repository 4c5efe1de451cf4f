"""
Easing functions for transitions.

Easing names follow the ``"<curve>[-<mode>]"`` convention, e.g. ``"cubic"``,
``"elastic-out"`` or ``"sin-in-out"``. Each curve is defined in its "in"
form; the mode derives the other shapes from it:

- in: the curve as defined (accelerating from zero velocity)
- out: reversed, ``1 - f(1 - t)``
- in-out: ``in`` for the first half, ``out`` for the second
- out-in: ``out`` for the first half, ``in`` for the second

Based on standard easing equations:
- Robert Penner's Easing Functions
- https://easings.net/
"""
import math
from enum import Enum
from typing import Callable, Dict, Optional

from proptween.constants.timing import DEFAULT_EASE_A, DEFAULT_EASE_B, DEFAULT_EASE_NAME
from proptween.errors import ConfigurationError

EaseFn = Callable[[float], float]


class EasingMode(Enum):
    """How a curve's "in" form is shaped."""
    IN = "in"
    OUT = "out"
    IN_OUT = "in-out"
    OUT_IN = "out-in"


# Linear (no easing)
def linear(t: float) -> float:
    """Linear interpolation - no easing."""
    return t


def quad_in(t: float) -> float:
    """Quadratic ease-in."""
    return t * t


def cubic_in(t: float) -> float:
    """Cubic ease-in."""
    return t * t * t


def quart_in(t: float) -> float:
    return t * t * t * t


def quint_in(t: float) -> float:
    return t * t * t * t * t


def sin_in(t: float) -> float:
    """Sine ease-in - accelerating using sine curve."""
    return 1 - math.cos(t * math.pi / 2)


def exp_in(t: float) -> float:
    """Exponential ease-in."""
    if t == 0:
        return 0.0
    return math.pow(2, 10 * (t - 1))


def circle_in(t: float) -> float:
    """Circular ease-in."""
    return 1 - math.sqrt(max(0.0, 1 - t * t))


def bounce_in(t: float) -> float:
    """Bounce ease-in - mirrored bounce."""
    n1 = 7.5625
    d1 = 2.75
    u = 1 - t

    if u < 1 / d1:
        out = n1 * u * u
    elif u < 2 / d1:
        u -= 1.5 / d1
        out = n1 * u * u + 0.75
    elif u < 2.5 / d1:
        u -= 2.25 / d1
        out = n1 * u * u + 0.9375
    else:
        u -= 2.625 / d1
        out = n1 * u * u + 0.984375
    return 1 - out


# Parameterised curves -------------------------------------------------

def poly_in(exponent: float) -> EaseFn:
    """Polynomial ease-in ``t ** exponent``."""
    def poly(t: float) -> float:
        return math.pow(t, exponent)
    return poly


def elastic_in(amplitude: float = DEFAULT_EASE_A, period: float = DEFAULT_EASE_B) -> EaseFn:
    """
    Elastic ease-in - a spring winding up before release.

    Args:
        amplitude: Peak overshoot; values below 1 are raised to 1.
        period: Oscillation period as a fraction of the transition.
    """
    if period <= 0:
        raise ConfigurationError(f"elastic period must be > 0, got {period!r}")
    if amplitude < 1:
        amplitude = 1.0
        s = period / 4
    else:
        s = period / (2 * math.pi) * math.asin(1 / amplitude)

    def elastic(t: float) -> float:
        if t == 0 or t == 1:
            return t
        t -= 1
        return -(amplitude * math.pow(2, 10 * t) * math.sin((t - s) * 2 * math.pi / period))
    return elastic


def back_in(overshoot: float = 1.70158) -> EaseFn:
    """Back ease-in - backing up slightly before accelerating."""
    def back(t: float) -> float:
        return t * t * ((overshoot + 1) * t - overshoot)
    return back


# Curve lookup table. Fixed curves map to their "in" function; parameterised
# curves map to a factory taking (a, b).
EASING_FUNCTIONS: Dict[str, EaseFn] = {
    "linear": linear,
    "quad": quad_in,
    "cubic": cubic_in,
    "quart": quart_in,
    "quint": quint_in,
    "sin": sin_in,
    "exp": exp_in,
    "circle": circle_in,
    "bounce": bounce_in,
}

PARAMETRIC_EASINGS: Dict[str, Callable[[Optional[float], Optional[float]], EaseFn]] = {
    "poly": lambda a, b: poly_in(DEFAULT_EASE_A if a is None else a),
    "elastic": lambda a, b: elastic_in(
        DEFAULT_EASE_A if a is None else a,
        DEFAULT_EASE_B if b is None else b,
    ),
    "back": lambda a, b: back_in() if a is None else back_in(a),
}


def _reverse(fn: EaseFn) -> EaseFn:
    return lambda t: 1 - fn(1 - t)


def _reflect(fn: EaseFn) -> EaseFn:
    return lambda t: 0.5 * (fn(2 * t) if t < 0.5 else 2 - fn(2 - 2 * t))


_MODES: Dict[EasingMode, Callable[[EaseFn], EaseFn]] = {
    EasingMode.IN: lambda fn: fn,
    EasingMode.OUT: _reverse,
    EasingMode.IN_OUT: _reflect,
    EasingMode.OUT_IN: lambda fn: _reflect(_reverse(fn)),
}


def clamp(fn: EaseFn) -> EaseFn:
    """Wrap ``fn`` so its input is clamped to [0, 1]."""
    def clamped(t: float) -> float:
        if t <= 0:
            return 0.0
        if t >= 1:
            return 1.0
        return fn(t)
    return clamped


def parse_easing_name(name: str) -> tuple:
    """
    Split an easing name into ``(curve, EasingMode)``.

    Raises:
        ConfigurationError: If the curve or mode is unknown.
    """
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Easing name must be a non-empty string, got {name!r}")
    curve, _, mode_text = name.strip().lower().partition("-")
    if curve not in EASING_FUNCTIONS and curve not in PARAMETRIC_EASINGS:
        raise ConfigurationError(f"Unknown easing curve: {curve!r} (from {name!r})")
    try:
        mode = EasingMode(mode_text) if mode_text else EasingMode.IN
    except ValueError:
        raise ConfigurationError(f"Unknown easing mode: {mode_text!r} (from {name!r})") from None
    return curve, mode


def get_easing_function(name: str, a: Optional[float] = None,
                        b: Optional[float] = None) -> EaseFn:
    """
    Get the unclamped easing function for a name.

    Args:
        name: Easing name, e.g. ``"quad-out"``
        a: First parameter (poly exponent, elastic amplitude, back overshoot)
        b: Second parameter (elastic period)

    Returns:
        Easing function mapping progress to eased progress

    Raises:
        ConfigurationError: If the name is not found
    """
    curve, mode = parse_easing_name(name)
    if curve in PARAMETRIC_EASINGS:
        base = PARAMETRIC_EASINGS[curve](a, b)
    else:
        base = EASING_FUNCTIONS[curve]
    if base is linear:
        return linear
    return _MODES[mode](base)


def ease(name: Optional[str] = None, a: Optional[float] = None,
         b: Optional[float] = None) -> EaseFn:
    """
    Resolve an easing function by name.

    The returned function clamps its input to [0, 1], so the final tick of
    a transition lands exactly on the curve's end point.

    Args:
        name: Easing name (defaults to ``"cubic-in-out"``)
        a: First easing parameter
        b: Second easing parameter

    Returns:
        Clamped easing function
    """
    return clamp(get_easing_function(name or DEFAULT_EASE_NAME, a, b))


def register_easing(curve: str, fn: EaseFn) -> None:
    """Register a custom curve in its "in" form under ``curve``."""
    if not curve or "-" in curve:
        raise ConfigurationError(f"Curve names must be non-empty and contain no '-': {curve!r}")
    if not callable(fn):
        raise ConfigurationError("Easing function must be callable")
    EASING_FUNCTIONS[curve.lower()] = fn
