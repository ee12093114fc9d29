"""Centralized logging configuration for the debugger.

Internal diagnostics (connection events, state transitions, recovered
errors) go through the standard logging module. Operator-facing output is
written by the presenter and never passes through here.

Usage:
    from vdebug.core.logging_config import configure_logging

    # Configure once at application startup
    configure_logging(level="DEBUG", format="json")

Environment Variables:
    VDEBUG_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    VDEBUG_LOG_FORMAT: Output format ("text" or "json")
    VDEBUG_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Diagnostics stay off the interactive console unless asked for
DEFAULT_LEVEL = "WARNING"

_configured = False

_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs logs as JSON objects with consistent structure:
    {
        "timestamp": "2026-10-19T14:30:00.123",
        "level": "DEBUG",
        "logger": "vdebug.core.session",
        "message": "command submitted",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure logging for the application.

    Subsequent calls are ignored unless force=True. Explicit arguments win
    over the VDEBUG_LOG_* environment variables.

    Args:
        level: Log level. Defaults to VDEBUG_LOG_LEVEL or "WARNING".
        format: Output format. Defaults to VDEBUG_LOG_FORMAT or "text".
        file_path: Optional file path. Defaults to VDEBUG_LOG_FILE.
        force: Force reconfiguration even if already configured.

    Raises:
        ValueError: If the level name is unknown.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("VDEBUG_LOG_LEVEL", DEFAULT_LEVEL)
    format = format or os.environ.get("VDEBUG_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("VDEBUG_LOG_FILE")

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True
