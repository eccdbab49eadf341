"""Logging configuration for the instinct CLI."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from instinct.config import Settings

_PACKAGE_LOGGER = "instinct"


class JsonFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields attached by store and manager calls
        for key in ("path", "instinct_id", "count"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Install a stderr handler on the package logger.

    Safe to call repeatedly: the handler installed by a previous call is
    replaced, so output always goes to the current ``sys.stderr``.
    """
    if settings is None:
        settings = Settings.from_env()

    logger = logging.getLogger(_PACKAGE_LOGGER)
    level = getattr(logging, settings.log_level, logging.INFO)
    logger.setLevel(level)

    for existing in list(logger.handlers):
        if getattr(existing, "_instinct_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler._instinct_handler = True  # type: ignore[attr-defined]

    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

    logger.addHandler(handler)
    return logger
