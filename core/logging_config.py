"""Logging configuration for the Wingsim engine and simulator."""

from __future__ import annotations

import json
import logging
import sys

HUMAN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record; messages are escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: str = "INFO", format_json: bool = False) -> None:
    """Configure the root logger.

    Library modules only call get_logger; entry points (the simulator CLI)
    call this once.

    Args:
        level: The logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_json: Emit one JSON object per line instead of plain text.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if format_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.root.setLevel(log_level)
    logging.root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (usually ``__name__``)."""
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "get_logger", "setup_logging"]
