"""
Tick drivers.

A tick driver repeatedly invokes ``callback(elapsed_ms)`` once ``delay_ms``
has passed, until the callback returns True. Two drivers are provided:

- QtTickDriver: real time. One shared precise QTimer drives every
  registered callback and stops itself when none remain. NO other QTimer
  should be used to step transitions.
- SyncTickDriver: no real time. Runs a callback to completion inside
  timer() with elapsed = 1, 2, 3, ... ms, for deterministic tests.

Transitions take a driver at construction; when none is given they use the
process-wide default returned by get_default_driver(). Sync mode swaps that
default for a SyncTickDriver until disabled.
"""
import time
from abc import ABCMeta, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from PySide6.QtCore import QObject, Qt, QTimer

from proptween.animation.types import TickCallback
from proptween.constants.timing import MAX_DRIVER_FPS, MIN_DRIVER_FPS
from proptween.logging.logger import get_logger, is_perf_metrics_enabled
from proptween.logging.tags import TAG_FALLBACK, TAG_PERF, TAG_TIMING
from proptween.settings.defaults import get_defaults, validate_delay, validate_max_iterations

logger = get_logger(__name__)


class TickDriver(metaclass=ABCMeta):
    """Interface for repeating tick sources."""

    # When False, Transition.execute() is a no-op and callers start the
    # tick sequence explicitly with Transition.execute_timer().
    defers_execution: bool = True

    @abstractmethod
    def timer(self, callback: TickCallback, delay_ms: float = 0.0) -> Optional[int]:
        """
        Invoke ``callback(elapsed_ms)`` repeatedly after ``delay_ms``.

        Args:
            callback: Returns True to stop further invocations
            delay_ms: Milliseconds to wait before the first invocation

        Returns:
            A driver-specific handle, or None
        """


# Combine QObject and ABC metaclasses
class QABCMeta(type(QObject), ABCMeta):
    """Metaclass combining QObject and ABC."""
    pass


@dataclass
class _TickEntry:
    callback: TickCallback
    start: float        # time.perf_counter() at which elapsed == 0


def _clamp_fps(fps: int) -> int:
    try:
        value = int(fps)
    except (TypeError, ValueError):
        logger.warning("%s Invalid fps %r, using %d", TAG_FALLBACK, fps, get_defaults().driver_fps)
        value = get_defaults().driver_fps
    return max(MIN_DRIVER_FPS, min(MAX_DRIVER_FPS, value))


class QtTickDriver(QObject, TickDriver, metaclass=QABCMeta):
    """
    Real-time tick driver backed by the Qt event loop.

    Callbacks receive the milliseconds elapsed since their start time
    (registration time plus delay). A callback that raises is logged and
    removed so it cannot fail on every frame.
    """

    def __init__(self, fps: Optional[int] = None, parent: Optional[QObject] = None):
        """
        Initialize the driver.

        Args:
            fps: Target ticks per second (defaults to the process-wide default)
            parent: Optional Qt parent
        """
        super().__init__(parent)

        self.fps = _clamp_fps(get_defaults().driver_fps if fps is None else fps)
        self.frame_time = 1.0 / self.fps

        self._entries: Dict[int, _TickEntry] = {}
        self._next_id = 1

        # Lightweight profiling state, reset on every start and logged on stop
        self._profile_start_ts: Optional[float] = None
        self._profile_frame_count = 0
        self._profile_max_dt = 0.0
        self._last_frame_ts: Optional[float] = None

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(int(self.frame_time * 1000))
        self._timer.timeout.connect(self._update_all)

        logger.debug("QtTickDriver initialized (fps=%d)", self.fps)

    def timer(self, callback: TickCallback, delay_ms: float = 0.0) -> int:
        delay_ms = validate_delay(delay_ms)
        timer_id = self._next_id
        self._next_id += 1
        self._entries[timer_id] = _TickEntry(callback, time.perf_counter() + delay_ms / 1000.0)
        if not self._timer.isActive():
            self._start()
        return timer_id

    def cancel(self, timer_id: int) -> bool:
        """Remove a callback without invoking it again."""
        if self._entries.pop(timer_id, None) is None:
            return False
        if not self._entries:
            self._stop()
        return True

    def active_count(self) -> int:
        return len(self._entries)

    def is_running(self) -> bool:
        return self._timer.isActive()

    def set_target_fps(self, fps: int) -> None:
        """Update target FPS and reconfigure the timer interval safely."""
        new_fps = _clamp_fps(fps)
        if new_fps == self.fps:
            return
        self.fps = new_fps
        self.frame_time = 1.0 / self.fps
        was_active = self._timer.isActive()
        if was_active:
            self._timer.stop()
        self._timer.setInterval(int(self.frame_time * 1000))
        if was_active:
            self._timer.start()
        logger.info("QtTickDriver target FPS set to %d", self.fps)

    def cleanup(self) -> None:
        """Drop every callback and stop the timer."""
        dropped = len(self._entries)
        self._entries.clear()
        self._stop()
        if dropped:
            logger.debug("%s QtTickDriver cleanup dropped %d callback(s)", TAG_TIMING, dropped)

    def _start(self) -> None:
        self._profile_start_ts = time.perf_counter()
        self._profile_frame_count = 0
        self._profile_max_dt = 0.0
        self._last_frame_ts = None
        self._timer.start()
        logger.debug("%s QtTickDriver started", TAG_TIMING)

    def _stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._log_profile_summary()
            logger.debug("%s QtTickDriver stopped", TAG_TIMING)

    def _update_all(self) -> None:
        """Invoke every due callback (called by the timer)."""
        now = time.perf_counter()
        if self._last_frame_ts is not None:
            self._profile_max_dt = max(self._profile_max_dt, now - self._last_frame_ts)
        self._last_frame_ts = now
        self._profile_frame_count += 1

        for timer_id, entry in list(self._entries.items()):
            if timer_id not in self._entries:
                # Cancelled by an earlier callback this frame
                continue
            if now < entry.start:
                continue
            elapsed_ms = (now - entry.start) * 1000.0
            try:
                done = bool(entry.callback(elapsed_ms))
            except Exception as e:
                logger.error("%s Tick callback failed, removing it: %s", TAG_TIMING, e, exc_info=True)
                done = True
            if done:
                self._entries.pop(timer_id, None)

        if not self._entries:
            self._stop()

    def _log_profile_summary(self) -> None:
        if not is_perf_metrics_enabled() or self._profile_start_ts is None:
            return
        elapsed = time.perf_counter() - self._profile_start_ts
        if elapsed <= 0.0 or self._profile_frame_count == 0:
            return
        logger.info(
            "%s QtTickDriver metrics: duration=%.1fms, frames=%d, avg_fps=%.1f, "
            "dt_max=%.2fms, fps_target=%d",
            TAG_PERF,
            elapsed * 1000.0,
            self._profile_frame_count,
            self._profile_frame_count / elapsed,
            self._profile_max_dt * 1000.0,
            self.fps,
        )


class SyncTickDriver(TickDriver):
    """
    Synchronous tick driver for deterministic tests.

    timer() returns only once the callback has returned True or the
    iteration ceiling is reached. The delay is ignored.
    """

    defers_execution = False

    def __init__(self, max_iterations: Optional[int] = None):
        if max_iterations is None:
            max_iterations = get_defaults().sync_max_iterations
        self.max_iterations = validate_max_iterations(max_iterations)
        self.last_run_ticks = 0
        self.total_ticks = 0
        self.runs = 0

    def timer(self, callback: TickCallback, delay_ms: float = 0.0) -> int:
        ticks = 0
        finished = False
        for elapsed in range(1, self.max_iterations + 1):
            ticks += 1
            if callback(elapsed):
                finished = True
                break
        if not finished:
            logger.warning(
                "%s SyncTickDriver reached its iteration ceiling (%d) before the callback finished",
                TAG_TIMING, self.max_iterations,
            )
        self.last_run_ticks = ticks
        self.total_ticks += ticks
        self.runs += 1
        return ticks


_default_driver: Optional[TickDriver] = None
_sync_driver: Optional[SyncTickDriver] = None


def get_default_driver() -> TickDriver:
    """Return the process-wide driver (the sync driver while sync mode is on)."""
    global _default_driver
    if _sync_driver is not None:
        return _sync_driver
    if _default_driver is None:
        _default_driver = QtTickDriver()
    return _default_driver


def set_default_driver(driver: Optional[TickDriver]) -> None:
    """Install the real-time default driver; None recreates a QtTickDriver on demand."""
    global _default_driver
    if driver is not None and not isinstance(driver, TickDriver):
        raise TypeError(f"Expected a TickDriver, got {type(driver).__name__}")
    _default_driver = driver


def enable_sync_mode(max_iterations: Optional[int] = None) -> SyncTickDriver:
    """
    Make the default driver synchronous.

    Args:
        max_iterations: Iteration ceiling (defaults to the process-wide default)

    Returns:
        The installed SyncTickDriver
    """
    global _sync_driver
    _sync_driver = SyncTickDriver(max_iterations)
    logger.debug("%s Sync mode enabled (max_iterations=%d)", TAG_TIMING, _sync_driver.max_iterations)
    return _sync_driver


def disable_sync_mode() -> None:
    """Restore the real-time default driver."""
    global _sync_driver
    if _sync_driver is not None:
        logger.debug("%s Sync mode disabled", TAG_TIMING)
    _sync_driver = None


def is_sync_mode() -> bool:
    return _sync_driver is not None


@contextmanager
def sync_mode(max_iterations: Optional[int] = None) -> Iterator[SyncTickDriver]:
    """Enable sync mode for the duration of a ``with`` block."""
    global _sync_driver
    previous = _sync_driver
    driver = enable_sync_mode(max_iterations)
    try:
        yield driver
    finally:
        _sync_driver = previous
