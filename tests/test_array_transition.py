"""Tests for collection fan-out via Transition.each()."""
import pytest

from proptween import CapabilityError, TransitionAlreadyStoppedError
from proptween.animation import (
    ArrayTransition,
    ObservableObject,
    TransitionState,
    create_transition,
    enable_sync_mode,
)


@pytest.fixture
def scene():
    """Host object holding a collection of mapping elements."""
    return ObservableObject(items=[{"v": 0}, {"v": 0}, {"v": 0}])


def test_each_returns_array_transition(scene, sync_driver):
    """each() wraps the transition without scheduling anything."""
    t = create_transition(scene, driver=sync_driver)
    arr = t.each("items")

    assert isinstance(arr, ArrayTransition)
    assert arr.transition is t
    assert arr.target is scene
    assert t.sets == []


def test_fan_out_with_element_function(scene, sync_driver):
    """Each element tweens to fn(element, index)."""
    t = create_transition(scene, {"duration": 10}, driver=sync_driver)
    seen = []

    def value(element, index):
        seen.append((element, index))
        return index * 10

    t.each("items").set("v", value)
    assert [index for _, index in seen] == [0, 1, 2]
    assert all(element is item for (element, _), item in zip(seen, scene.get("items")))

    t.execute_timer()
    assert [item["v"] for item in scene.get("items")] == [0, 10, 20]
    assert t.state == TransitionState.COMPLETED


def test_element_state_feeds_new_value():
    """Each element tweens from its own value to item["v"] + index."""
    enable_sync_mode()
    items = [{"v": 0}, {"v": 10}, {"v": 20}]
    host = ObservableObject(items=items)

    t = create_transition(host, {"duration": 100})
    t.each("items").set("v", lambda item, i: item["v"] + i)
    t.execute_timer()

    assert [item["v"] for item in items] == [0, 11, 22]
    assert t.state == TransitionState.COMPLETED


def test_fan_out_with_literal_value(scene, sync_driver):
    """A literal value applies to every element."""
    t = create_transition(scene, {"duration": 10}, driver=sync_driver)
    t.each("items").set("v", 5)

    assert [r.new_value for r in t.sets] == [5, 5, 5]
    t.execute_timer()
    assert [item["v"] for item in scene.get("items")] == [5, 5, 5]


def test_collection_read_when_set_is_called(scene, sync_driver):
    """Elements added after each() are included."""
    t = create_transition(scene, driver=sync_driver)
    arr = t.each("items")
    scene.get("items").append({"v": 7})

    arr.set("v", 1)
    assert len(t.sets) == 4
    assert t.sets[-1].old_value == 7


def test_unset_collection_fans_out_to_nothing(sync_driver):
    """A missing collection produces no records and no error."""
    host = ObservableObject()
    t = create_transition(host, driver=sync_driver)

    arr = t.each("items").set("v", 1)
    assert isinstance(arr, ArrayTransition)
    assert t.sets == []
    assert t.state == TransitionState.PENDING


def test_get_set_elements(sync_driver):
    """Elements exposing get/set are used directly."""
    dots = [ObservableObject(alpha=1.0), ObservableObject(alpha=1.0)]
    host = ObservableObject(dots=dots)
    t = create_transition(host, {"duration": 4}, driver=sync_driver)
    t.each("dots").set("alpha", lambda dot, i: 0.5 * i)

    assert [r.target for r in t.sets] == dots
    t.execute_timer()
    assert [dot.get("alpha") for dot in dots] == [0.0, 0.5]


def test_bad_element_adds_no_records(sync_driver):
    """A non-addressable element fails the whole fan-out."""
    host = ObservableObject(items=[{"v": 0}, 42])
    t = create_transition(host, driver=sync_driver)

    with pytest.raises(CapabilityError):
        t.each("items").set("v", 1)
    assert t.sets == []


def test_configuration_proxies(scene, sync_driver):
    """Timing and easing calls forward to the wrapped transition."""
    t = create_transition(scene, driver=sync_driver)
    arr = t.each("items")

    assert arr.delay(5).duration(50).ease("quad-out") is arr
    assert t.config.delay == 5
    assert t.config.duration == 50
    assert t.easer(1.0) == 1.0

    arr.ease_with(lambda c: c)
    assert t.easer(0.3) == 0.3


def test_stop_proxies_to_transition(scene, sync_driver):
    t = create_transition(scene, driver=sync_driver)
    arr = t.each("items")
    arr.stop()

    assert t.killed
    with pytest.raises(TransitionAlreadyStoppedError):
        arr.set("v", 1)


def test_fan_out_and_plain_set_share_one_execution(scene, qtbot, recording_driver):
    """Records from set() and each().set() start in a single tick sequence."""
    scene.set("x", 0)
    t = create_transition(scene, {"duration": 100}, driver=recording_driver)
    t.each("items").set("v", 1)
    t.set("x", 5)

    qtbot.waitUntil(lambda: len(recording_driver.calls) == 1, timeout=1000)
    qtbot.wait(20)
    assert len(recording_driver.calls) == 1

    recording_driver.run([100])
    assert scene.get("x") == 5
    assert [item["v"] for item in scene.get("items")] == [1, 1, 1]
