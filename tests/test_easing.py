"""Tests for named easing curves."""
import pytest

from proptween import ConfigurationError
from proptween.animation import EASING_FUNCTIONS, EasingMode, ease, get_easing_function, register_easing
from proptween.animation.easing import parse_easing_name

CURVES = ["linear", "quad", "cubic", "quart", "quint", "sin", "exp", "circle", "bounce",
          "poly", "elastic", "back"]
MODES = ["in", "out", "in-out", "out-in"]


@pytest.mark.parametrize("mode", MODES)
@pytest.mark.parametrize("curve", CURVES)
def test_curves_start_at_zero_and_end_at_one(curve, mode):
    """Test every curve/mode pair maps 0 -> 0 and 1 -> 1."""
    fn = ease(f"{curve}-{mode}")
    assert fn(0.0) == pytest.approx(0.0, abs=1e-9)
    assert fn(1.0) == pytest.approx(1.0, abs=1e-9)


def test_default_is_cubic_in_out():
    """Test ease() without a name resolves cubic-in-out."""
    fn = ease()
    assert fn(0.25) == pytest.approx(0.0625)
    assert fn(0.5) == pytest.approx(0.5)
    assert fn(0.75) == pytest.approx(0.9375)


def test_name_without_mode_is_in():
    assert ease("quad")(0.5) == ease("quad-in")(0.5) == pytest.approx(0.25)


def test_out_mode_reverses_curve():
    assert ease("quad-out")(0.5) == pytest.approx(0.75)


def test_in_out_is_symmetric():
    fn = ease("cubic-in-out")
    assert fn(0.25) + fn(0.75) == pytest.approx(1.0)


def test_out_in_mode():
    fn = ease("quad-out-in")
    assert fn(0.25) == pytest.approx(0.375)
    assert fn(0.5) == pytest.approx(0.5)


def test_names_are_case_insensitive():
    assert ease("QUAD-Out")(0.5) == pytest.approx(0.75)


def test_linear_ignores_mode():
    assert ease("linear-out")(0.3) == pytest.approx(0.3)


def test_ease_clamps_input():
    """Test named easings clamp progress to [0, 1]."""
    fn = ease("quad")
    assert fn(-0.5) == 0.0
    assert fn(1.5) == 1.0


def test_get_easing_function_is_unclamped():
    assert get_easing_function("quad")(2.0) == pytest.approx(4.0)


def test_parse_easing_name():
    assert parse_easing_name("elastic-out") == ("elastic", EasingMode.OUT)
    assert parse_easing_name("sin") == ("sin", EasingMode.IN)
    assert parse_easing_name(" Back-In-Out ") == ("back", EasingMode.IN_OUT)


@pytest.mark.parametrize("name", ["wobble", "quad-sideways", "", "   ", None, 3])
def test_invalid_names_rejected(name):
    with pytest.raises(ConfigurationError):
        get_easing_function(name)


class TestParametricCurves:
    """poly, elastic and back take parameters a/b."""

    def test_poly_exponent(self):
        assert ease("poly", 3)(0.5) == pytest.approx(0.125)
        assert ease("poly")(0.5) == pytest.approx(0.5)

    def test_back_overshoots_below_zero(self):
        assert ease("back-in")(0.5) < 0

    def test_back_with_zero_overshoot_is_cubic(self):
        assert ease("back", 0)(0.5) == pytest.approx(0.125)

    def test_elastic_out_overshoots_one(self):
        fn = ease("elastic-out")
        assert any(fn(i / 100) > 1 for i in range(1, 100))

    def test_elastic_small_amplitude_raised_to_one(self):
        low = ease("elastic-out", 0.5)
        one = ease("elastic-out", 1)
        assert low(0.3) == pytest.approx(one(0.3))

    @pytest.mark.parametrize("period", [0, -0.5])
    def test_elastic_period_must_be_positive(self, period):
        with pytest.raises(ConfigurationError):
            ease("elastic", 1, period)


class TestRegisterEasing:
    """Custom curves participate in name lookup and modes."""

    def test_register_custom_curve(self):
        register_easing("sqrt", lambda t: t ** 0.5)
        try:
            assert ease("sqrt")(0.25) == pytest.approx(0.5)
            assert ease("sqrt-out")(0.75) == pytest.approx(0.5)
        finally:
            EASING_FUNCTIONS.pop("sqrt", None)

    @pytest.mark.parametrize("curve", ["", "my-curve"])
    def test_invalid_curve_name(self, curve):
        with pytest.raises(ConfigurationError):
            register_easing(curve, lambda t: t)

    def test_non_callable_rejected(self):
        with pytest.raises(ConfigurationError):
            register_easing("flat", 0.5)
