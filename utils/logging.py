"""
Structured logging: JSON for cloud aggregators, readable format for dev.
Configured from env (LOG_LEVEL, LOG_JSON). Credential-bearing fields are redacted.
"""

import json
import logging
import sys
from typing import Any

from core.config import get_settings

# Never emitted in clear, whatever the caller passes in extra=
SENSITIVE_KEYS = frozenset({"password", "password_hash", "token", "authorization"})

_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "exc_info", "exc_text",
        "message", "asctime", "taskName", "thread", "threadName",
    }
)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger with app-level config applied.
    Use logger.info("event", extra={"key": "value"}) for structured fields.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    settings = get_settings()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(TextFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields supplied via extra=, with sensitive values redacted."""
    fields: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _RESERVED_ATTRS or key.startswith("_"):
            continue
        fields[key] = "(redacted)" if key.lower() in SENSITIVE_KEYS else value
    return fields


class TextFormatter(logging.Formatter):
    """Human-readable line with extras appended as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = extra_fields(record)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON for CloudWatch, Datadog, etc."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        log_obj.update(extra_fields(record))
        return json.dumps(log_obj, default=str)
