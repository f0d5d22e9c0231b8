"""Logging setup for persevere.

The engine logs through standard-library loggers under ``persevere``
(``persevere.retry``, ``persevere.scheduler``, ``persevere.signal``).
``configure_logging`` attaches a single handler to that tree, rendering
either human-readable lines or JSON Lines for log aggregation.

Quick Start:
    >>> from persevere.runtime.observability import configure_logging
    >>> configure_logging(format="json", level="INFO")
    >>> # or read PERSEVERE_LOG_FORMAT / PERSEVERE_LOG_LEVEL:
    >>> configure_logging()
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from persevere.foundation.config import get_settings

ROOT_LOGGER = "persevere"

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """JSON Lines output. One object per record with timestamp, level, logger, event."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str).decode()


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Configure the ``persevere`` logger.

    Args:
        format: "text" (human) or "json" (machine); default from LoggingSettings
        level: Minimum level name; default from LoggingSettings
        output: Output stream (default: stderr)

    Returns:
        The installed handler (replaces one installed by an earlier call)
    """
    settings = get_settings().logging
    format = format or settings.format
    level = (level or settings.level).upper()

    formatter: logging.Formatter
    if format == "text":
        formatter = logging.Formatter(_TEXT_FORMAT)
    elif format == "json":
        formatter = JsonFormatter()
    else:
        raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if getattr(h, "_persevere", False)]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    handler._persevere = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    return handler
