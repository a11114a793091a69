"""Centralized logging configuration for the chromepak codec."""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "chromepak"

_RESERVED_ATTRS = frozenset(
    [
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName",
    ]
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Fields passed through ``extra=`` are emitted as top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the ``chromepak`` namespace."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler to the ``chromepak`` logger.

    Args:
        level: Logging level name; defaults to ``CHROMEPAK_LOG_LEVEL``
        log_format: ``json`` or ``text``; defaults to ``CHROMEPAK_LOG_FORMAT``

    Returns:
        The configured package logger
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    resolved_level = getattr(logging, level_name, logging.WARNING)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(resolved_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved_level)

    if (log_format or settings.log_format).lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())
