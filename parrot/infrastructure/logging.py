"""
Centralized Logging

Architectural Intent:
- Provides human-readable or structured JSON logging for all Parrot components
- Centralizes log configuration to avoid scattered print() calls
- Supports configurable log levels via CLI flags (--verbose, --debug)
- Can write to a file so log output never lands on the full-screen display
"""

import json
import logging
import sys
from datetime import datetime, UTC
from typing import Optional

ROOT_LOGGER = "parrot"


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def parse_level(name: str, default: int = logging.WARNING) -> int:
    """Map a level name such as "debug" to its logging constant."""
    level = logging.getLevelName(name.strip().upper()) if name else default
    return level if isinstance(level, int) else default


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging for the Parrot application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, etc.)
        json_format: If True, use JSON structured output. Otherwise human-readable.
        log_file: Append to this file instead of writing to stderr.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)

    # Remove existing handlers
    for old in root.handlers:
        old.close()
    root.handlers.clear()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )

    root.addHandler(handler)
