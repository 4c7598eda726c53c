"""JSON-lines logging for the terminal, plus crash hooks for the desktop app."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root

_LOGGER_NAME = "teletext"
_EXTRA_FIELDS = ("event", "page_number", "generation", "state", "crash_id")
LEVEL_ENV = "TELETEXT_LOG_LEVEL"


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_level(level: int | str | None = None) -> int:
    """Numeric level from an int, a level name or ``TELETEXT_LOG_LEVEL``; INFO otherwise."""
    if level is None:
        level = os.environ.get(LEVEL_ENV, "").strip() or logging.INFO
    if isinstance(level, int):
        return level
    named = logging.getLevelName(str(level).upper())
    return named if isinstance(named, int) else logging.INFO


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class ConsoleFormatter(logging.Formatter):
    """``LEVEL logger [event] message`` for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", None)
        tag = f" [{event}]" if event else ""
        line = f"{record.levelname} {record.name}{tag} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(keep_files: int = 7, console: bool = True, level: int | str | None = None) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(level))
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir() / "teletext.log"),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def _install_fault_handler(logger: logging.Logger) -> None:
    fh = (log_dir() / "fault.log").open("a", encoding="utf-8")
    faulthandler.enable(file=fh, all_threads=True)
    logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})


def install_crash_hooks() -> None:
    logger = get_logger()

    def _report(kind: str, exc_info) -> None:
        crash_id = str(uuid.uuid4())
        logger.critical(
            f"{kind.replace('_', ' ')} crash_id={crash_id}",
            exc_info=exc_info,
            extra={"event": kind, "crash_id": crash_id},
        )

    sys.excepthook = lambda exc_type, exc_value, exc_tb: _report(
        "uncaught_exception", (exc_type, exc_value, exc_tb)
    )
    threading.excepthook = lambda args: _report(
        "thread_exception", (args.exc_type, args.exc_value, args.exc_traceback)
    )
    _install_fault_handler(logger)
