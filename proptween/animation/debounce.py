"""
Single-slot debounce primitive.

A Debouncer holds at most one pending deferred call. Each trigger() cancels
the pending call (if any) and schedules a fresh one, so a burst of triggers
from one synchronous stretch of caller code collapses into a single call on
the next Qt event-loop pass.
"""
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from proptween.constants.timing import DEBOUNCE_INTERVAL_MS
from proptween.logging.logger import get_logger, is_verbose_logging
from proptween.logging.tags import TAG_TIMING

logger = get_logger(__name__)


class Debouncer(QObject):
    """Cancel-and-replace wrapper around a single-shot QTimer."""

    def __init__(self, callback: Callable[[], None], interval_ms: int = DEBOUNCE_INTERVAL_MS,
                 parent: Optional[QObject] = None):
        """
        Args:
            callback: Invoked once per settled burst of triggers
            interval_ms: Deferral before the call fires
            parent: Optional Qt parent
        """
        super().__init__(parent)
        self._callback = callback
        self._interval_ms = int(interval_ms)
        self._pending: Optional[QTimer] = None
        self.trigger_count = 0
        self.fire_count = 0

    def trigger(self) -> None:
        """Replace any pending call with a new one."""
        self.cancel()
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(self._interval_ms)
        timer.timeout.connect(self._fire)
        self._pending = timer
        self.trigger_count += 1
        timer.start()
        if is_verbose_logging():
            logger.debug("%s Debounce armed (triggers=%d)", TAG_TIMING, self.trigger_count)

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        timer = self._pending
        if timer is None:
            return False
        self._pending = None
        timer.stop()
        timer.deleteLater()
        return True

    def is_pending(self) -> bool:
        return self._pending is not None

    def _fire(self) -> None:
        timer = self._pending
        if timer is None:
            return
        self._pending = None
        timer.deleteLater()
        self.fire_count += 1
        self._callback()
