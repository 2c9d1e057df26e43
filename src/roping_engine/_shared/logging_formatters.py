# Area: Shared
"""
roping_engine._shared.logging_formatters — Logging formatters
=============================================================

Terminal and JSON formatters used by the package handlers. The JSON
formatter carries the event, team and round of a record when a caller
passes them through ``extra``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

# Record attributes copied into JSON lines when present
CONTEXT_FIELDS = ("error_type", "event_id", "team_id", "round")


class TerminalFormatter(logging.Formatter):
    """Colored level names for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # The record is shared with the file handler, which must see the plain name
        levelname = record.levelname
        record.levelname = f"{self.COLORS.get(levelname, self.RESET)}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for the log file."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)
