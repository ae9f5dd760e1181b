"""JSON logging for the relay, tagged with the request correlation ID."""

import hashlib
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .correlation import get_correlation_id


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extra fields go under ``extra_fields``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            entry["correlationId"] = correlation_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        return json.dumps(entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that writes JSON lines to stdout."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

    return logger


def hash_identifier(value: str) -> str:
    """Non-reversible short hash of a phone number or other identifier.

    Log this instead of the identifier itself.
    """
    return hashlib.sha256(value.encode()).hexdigest()[:12]
