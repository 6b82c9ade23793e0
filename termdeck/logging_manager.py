"""Centralized logging configuration for termdeck."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FILE_NAME = "termdeck.log"

_logger: Optional[logging.Logger] = None
_console_muted = False
_log_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "termdeck_log_context", default={}
)


def log_directory() -> Path:
    """Return the directory receiving the rotating JSON log file."""

    explicit = os.environ.get("TERMDECK_LOG_DIR")
    if explicit:
        return Path(explicit).expanduser()
    state_home = os.environ.get("XDG_STATE_HOME")
    base = Path(state_home).expanduser() if state_home else Path.home() / ".local" / "state"
    return base / "termdeck" / "log"


class JSONLogFormatter(logging.Formatter):
    """Render log records as structured JSON strings."""

    DEFAULT_FIELDS: tuple[str, ...] = (
        "event",
        "document",
        "slide",
        "duration_ms",
        "status",
    )

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "pid": record.process,
        }

        for attr in self.DEFAULT_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                payload[attr] = value

        extra_attributes = _extract_extra_attributes(record)
        if extra_attributes:
            payload["extra"] = extra_attributes

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _extract_extra_attributes(record: logging.LogRecord) -> Dict[str, object]:
    reserved: set[str] = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
        "console_suppress",
    }
    extra: Dict[str, object] = {}
    for key, value in record.__dict__.items():
        if key in reserved or key in JSONLogFormatter.DEFAULT_FIELDS:
            continue
        extra[key] = value
    return extra


class LogContextFilter(logging.Filter):
    """Inject values from context variables into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        context = _log_context.get()
        for key, value in context.items():
            setattr(record, key, value)
        return True


class ConsoleFilter(logging.Filter):
    """Keep records flagged ``console_suppress`` (and everything while muted) off stderr."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if _console_muted:
            return False
        return not getattr(record, "console_suppress", False)


def _configure_handlers(logger: logging.Logger) -> None:
    log_dir = log_directory()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError:
        file_handler = None
    if file_handler is not None:
        file_handler.setFormatter(JSONLogFormatter())
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    stream_handler.addFilter(ConsoleFilter())
    logger.addHandler(stream_handler)


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Configure application-wide logging with a rotating file handler."""
    global _logger

    if _logger is not None:
        configure_logging_level(log_level=log_level)
        return _logger

    logger = logging.getLogger("termdeck")
    logger.setLevel(log_level)
    logger.propagate = False
    logger.addFilter(LogContextFilter())
    _configure_handlers(logger)

    _logger = logger
    configure_logging_level(log_level=log_level)
    return logger


def get_logger() -> logging.Logger:
    """Return the configured logger instance, initializing if necessary."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Adjust the global logger level based on debug preference or explicit level."""
    logger = get_logger()
    if log_level is not None:
        level = log_level
    else:
        level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return level


def get_log_context() -> Dict[str, object]:
    """Return the active structured logging context."""

    return dict(_log_context.get())


def push_log_context(**values: object) -> contextvars.Token[Dict[str, object]]:
    """Merge ``values`` into the structured logging context and return a token."""

    current = dict(_log_context.get())
    current.update({key: value for key, value in values.items() if value is not None})
    return _log_context.set(current)


def pop_log_context(token: contextvars.Token[Dict[str, object]]) -> None:
    """Restore the logging context from ``token``."""

    _log_context.reset(token)


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Context manager that temporarily enriches log context with ``values``."""

    token = push_log_context(**values)
    try:
        yield
    finally:
        pop_log_context(token)


@contextlib.contextmanager
def suppress_console() -> Iterator[None]:
    """Silence the stderr handler while another component owns the terminal."""

    global _console_muted
    previous = _console_muted
    _console_muted = True
    try:
        yield
    finally:
        _console_muted = previous


def _console(level: int, message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    target = logger_obj or get_logger()
    target.log(level, message, *args, extra={"event": "console"})


def console_info(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    """Emit a user-facing informational message."""

    _console(logging.INFO, message, *args, logger_obj=logger_obj)


def console_warning(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    """Emit a user-facing warning."""

    _console(logging.WARNING, message, *args, logger_obj=logger_obj)


def console_error(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    """Emit a user-facing error."""

    _console(logging.ERROR, message, *args, logger_obj=logger_obj)


# Initialize logger on import so every module shares the same handlers
logger = get_logger()
