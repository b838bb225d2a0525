"""Structured Logging - gateway log formats and single-handler setup.

Invariants:
    - Every line carries the record's own timestamp, level, logger name and message
    - Gateway context fields (EXTRA_FIELDS) are surfaced in both formats when present;
      other extras never leave the process
    - JSON format in production, "key=value" suffixed text in development, so a
      fatal fault's kind and a rejected origin are visible in either
    - setup_logging is idempotent: a second call replaces the handler it installed
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

EXTRA_FIELDS = (
    "error_code", "path", "origin", "method",
    "environment", "port", "database", "fault",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with gateway context appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = " ".join(f"{key}={val}" for key, val in _extras(record).items())
        return f"{line} [{context}]" if context else line


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure logging for the application."""
    global _handler
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    if _handler is not None:
        logging.root.removeHandler(_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler
    return handler
