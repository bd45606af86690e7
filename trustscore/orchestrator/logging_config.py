"""
TrustScore Logging Setup
========================

One console handler on stderr, plus an optional rotating log file.
Lines are either human-readable or JSON (LOG_JSON=true), where lookup
context passed through ``extra=`` (business unit id, page, score,
duration) becomes top-level keys.

Usage:
    from trustscore.orchestrator.logging_config import setup_logging_from_settings

    setup_logging_from_settings(verbose=True)
"""

import json
import logging
import logging.handlers
import os
import sys
from typing import Optional

# Lookup context copied from ``extra=`` into JSON lines
CONTEXT_FIELDS = ("business_unit_id", "page", "score", "duration")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s | %(message)s"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, context fields, exception."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
):
    """
    Replace the root handlers with TrustScore's.

    Args:
        level: Root log level name; unknown names fall back to INFO
        json_output: Emit JSON lines instead of log_format
        log_file: Also write to this file, rotated at 10 MB
        log_format: Format string for human-readable lines
    """
    if json_output:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # stdout is reserved for command output
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS,
        ))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)


def setup_logging_from_settings(verbose: bool = False):
    """
    Configure logging from LoggingConfig; verbose forces DEBUG.

    Raises:
        ValueError: If any setting is invalid (settings are loaded here)
    """
    from ..data.config import get_settings

    config = get_settings().logging
    setup_logging(
        level="DEBUG" if verbose else config.level,
        json_output=config.json_logs,
        log_file=config.log_file,
        log_format=config.format,
    )
