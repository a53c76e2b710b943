"""
Trust Profile Logging Setup

Every module logs through ``logging.getLogger(__name__)`` under the
``trustprofile`` hierarchy. Applications (the CLI) call
`configure_logging` once to attach a handler.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional


ROOT_LOGGER = "trustprofile"

PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"

# LogRecord extras copied into JSON log lines when present
EXTRA_FIELDS = ("profile", "statement_id", "block_name", "duration_ms")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the ``trustprofile`` logger.

    Calling it again replaces the handler rather than adding another.
    Logs go to stderr by default so stdout stays clean for report output.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
