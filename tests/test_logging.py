"""Tests for centralized logging configuration."""
import io
import logging

import pytest

from proptween.logging import logger as logger_module
from proptween.logging.logger import (
    ColoredFormatter,
    SuppressingStreamHandler,
    get_log_dir,
    get_logger,
    is_perf_metrics_enabled,
    is_verbose_logging,
    set_perf_metrics_enabled,
    setup_logging,
)


@pytest.fixture
def isolated_logging(monkeypatch, tmp_path):
    """Run setup_logging() against a temp dir and undo its handlers afterwards."""
    monkeypatch.setattr(logger_module, "_VERBOSE", False)
    monkeypatch.setattr(logger_module, "_LOG_DIR", tmp_path)
    package_logger = logging.getLogger("proptween")
    saved_level = package_logger.level
    yield tmp_path
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(saved_level)


def _record(name, level, msg):
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_setup_logging_writes_file(isolated_logging):
    """Test log records reach the rotating file."""
    log_file = setup_logging(log_dir=isolated_logging)
    assert get_log_dir() == isolated_logging
    get_logger("proptween.animation.transition").info("hello from test")
    for handler in logging.getLogger("proptween").handlers:
        handler.flush()

    assert log_file == isolated_logging / "proptween.log"
    text = log_file.read_text(encoding="utf-8")
    assert "hello from test" in text
    assert "proptween.transition" in text


def test_setup_logging_console_only_in_debug(isolated_logging):
    setup_logging(log_dir=isolated_logging)
    handlers = logging.getLogger("proptween").handlers
    assert not any(isinstance(h, SuppressingStreamHandler) for h in handlers)

    setup_logging(debug=True, log_dir=isolated_logging)
    handlers = logging.getLogger("proptween").handlers
    assert sum(isinstance(h, SuppressingStreamHandler) for h in handlers) == 1
    assert logging.getLogger("proptween").level == logging.DEBUG


def test_verbose_implies_debug(isolated_logging):
    setup_logging(verbose=True, log_dir=isolated_logging)
    assert is_verbose_logging()
    assert logging.getLogger("proptween").level == logging.DEBUG


def test_short_names():
    assert get_logger("proptween.animation.transition").name == "proptween.transition"
    assert get_logger("proptween.settings.defaults").name == "proptween.settings"
    assert get_logger("proptween.animation.easing").name == "proptween.animation.easing"


def test_perf_metrics_toggle(monkeypatch):
    monkeypatch.setattr(logger_module, "_PERF_METRICS_ENABLED", False)
    assert not is_perf_metrics_enabled()
    set_perf_metrics_enabled(True)
    assert is_perf_metrics_enabled()


class TestSuppressingStreamHandler:

    @pytest.fixture
    def handler(self):
        stream = io.StringIO()
        handler = SuppressingStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(name)s:%(message)s"))
        return handler, stream

    def test_consecutive_duplicates_collapsed(self, handler):
        handler, stream = handler
        for i in range(3):
            handler.emit(_record("proptween.transition", logging.DEBUG, f"tick {i}"))
        handler.emit(_record("proptween.drivers", logging.DEBUG, "stopped"))

        lines = stream.getvalue().splitlines()
        assert lines == [
            "proptween.transition:tick 0",
            "proptween.transition:[2 Suppressed: CHECK LOG]",
            "proptween.drivers:stopped",
        ]

    def test_warnings_always_pass(self, handler):
        handler, stream = handler
        handler.emit(_record("proptween.drivers", logging.WARNING, "one"))
        handler.emit(_record("proptween.drivers", logging.WARNING, "two"))

        assert stream.getvalue().splitlines() == ["proptween.drivers:one", "proptween.drivers:two"]

    def test_close_flushes_summary(self, handler):
        handler, stream = handler
        handler.emit(_record("proptween.transition", logging.DEBUG, "a"))
        handler.emit(_record("proptween.transition", logging.DEBUG, "b"))
        handler.close()

        assert stream.getvalue().splitlines()[-1] == "proptween.transition:[1 Suppressed: CHECK LOG]"


class TestColoredFormatter:

    def test_levelname_restored_after_format(self):
        formatter = ColoredFormatter("%(levelname)s %(message)s")
        record = _record("proptween", logging.INFO, "plain")
        output = formatter.format(record)

        assert ColoredFormatter.COLORS["INFO"] in output
        assert record.levelname == "INFO"

    def test_fallback_messages_highlighted(self):
        formatter = ColoredFormatter("%(message)s")
        output = formatter.format(_record("proptween", logging.WARNING, "[FALLBACK] default used"))
        assert output.startswith(ColoredFormatter.FALLBACK_COLOR)
