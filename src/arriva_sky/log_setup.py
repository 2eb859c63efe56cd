"""One-JSON-object-per-line console logging for the API and CLI."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_for_logging, sanitize_text

# Attributes callers may attach with ``logger.info(..., extra={...})``.
STRUCTURED_FIELDS: tuple[str, ...] = (
    "provider",
    "elapsed_ms",
    "sky_phase",
    "condition",
    "source",
    "cached",
)


class JsonConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                event[field] = sanitize_for_logging(getattr(record, field))
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(name: str = "arriva_sky", level: int | str = logging.INFO) -> logging.Logger:
    """Configure the package logger once; ``arriva_sky.*`` children propagate into it."""
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
