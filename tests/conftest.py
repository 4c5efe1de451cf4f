"""
Shared pytest fixtures for proptween tests.
"""
import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from proptween.animation.drivers import (
    SyncTickDriver,
    TickDriver,
    disable_sync_mode,
    set_default_driver,
)
from proptween.settings.defaults import reset_defaults


class RecordingDriver(TickDriver):
    """Driver that records timer() calls without ticking."""

    def __init__(self):
        self.calls = []

    def timer(self, callback, delay_ms=0.0):
        self.calls.append((callback, delay_ms))
        return len(self.calls)

    def run(self, elapsed_values, index=-1):
        """Feed elapsed values to a recorded callback until it returns True."""
        callback = self.calls[index][0]
        results = []
        for elapsed in elapsed_values:
            results.append(callback(elapsed))
            if results[-1]:
                break
        return results


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def sync_driver():
    return SyncTickDriver()


@pytest.fixture
def recording_driver():
    return RecordingDriver()


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Undo sync mode, default-driver and default-timing changes after each test."""
    yield
    disable_sync_mode()
    set_default_driver(None)
    reset_defaults()
