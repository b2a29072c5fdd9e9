"""Structured Logging — JSON formatter and setup for ledger observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (registry, record_id, caller, error_code) surfaced when present
    - JSON format in production, human-readable in development
    - At most one ledger handler on the root logger: reconfiguring replaces it

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency
    - configure_logging(settings) is the single wiring point for LOG_LEVEL / LOG_FORMAT;
      the embedding process calls it once on startup
"""

import logging
import json
from datetime import datetime, timezone

from algoledger.config import Settings, get_settings

EXTRA_FIELDS = ("registry", "record_id", "caller", "recipient", "error_code")

_installed_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging. Returns the installed handler."""
    global _installed_handler
    if _installed_handler is not None:
        logging.root.removeHandler(_installed_handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _installed_handler = handler
    return handler


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """Apply Settings.log_level / Settings.log_format to the root logger."""
    settings = settings or get_settings()
    return setup_logging(settings.log_level, settings.log_format)
