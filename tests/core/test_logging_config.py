"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest

from vdebug.core import logging_config
from vdebug.core.logging_config import JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest set it up."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    configured = logging_config._configured
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_config._configured = configured


class TestConfigureLogging:
    def test_sets_level(self):
        configure_logging(level="DEBUG", force=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_default_level_is_warning(self, monkeypatch):
        monkeypatch.delenv("VDEBUG_LOG_LEVEL", raising=False)

        configure_logging(force=True)

        assert logging.getLogger().level == logging.WARNING

    def test_environment_level(self, monkeypatch):
        monkeypatch.setenv("VDEBUG_LOG_LEVEL", "info")

        configure_logging(force=True)

        assert logging.getLogger().level == logging.INFO

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="CHATTY", force=True)

    def test_second_call_ignored_without_force(self):
        configure_logging(level="ERROR", force=True)
        configure_logging(level="DEBUG")

        assert logging.getLogger().level == logging.ERROR

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "vdebug.log"

        configure_logging(level="INFO", file_path=str(log_file), force=True)
        logging.getLogger("vdebug.test").info("session started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "session started" in log_file.read_text()


class TestJsonFormatter:
    def test_format(self):
        record = logging.LogRecord(
            name="vdebug.core.session",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="No reply for %r",
            args=("1+1",),
            exc_info=None,
        )
        record.peer = "127.0.0.1"

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "vdebug.core.session"
        assert data["message"] == "No reply for '1+1'"
        assert data["extra"] == {"peer": "127.0.0.1"}
