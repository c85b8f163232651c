"""
Structured JSON logging configuration.

This module provides:
- JSON-formatted single-line log output
- Report ID propagation via contextvars, so every log line emitted while an
  export is being rendered can be correlated
- Consistent log structure across all modules

Log Structure (JSON):
{
    "timestamp": "2024-01-15T10:30:00.000Z",
    "level": "INFO",
    "logger": "bp_svc.services.export.report_renderer",
    "message": "Report rendered",
    "report_id": "abc-123",
    "extra": { ... }
}

Usage:
    from bp_svc.core.logging_config import setup_logging

    setup_logging()
    logger.info("Rendering report", extra={"readings": 12})
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# =============================================================================
# REPORT ID CONTEXT
# =============================================================================
# Each export render gets a unique ID that propagates through all log
# statements made while it runs.

report_id_var: ContextVar[Optional[str]] = ContextVar("report_id", default=None)


def get_report_id() -> Optional[str]:
    """Get the current report ID from context."""
    return report_id_var.get()


def set_report_id(report_id: str):
    """Set the report ID in context. Returns a token for reset_report_id()."""
    return report_id_var.set(report_id)


def reset_report_id(token) -> None:
    """Restore the report ID that was active before set_report_id()."""
    report_id_var.reset(token)


# =============================================================================
# JSON FORMATTER
# =============================================================================

# Standard LogRecord attributes that are not "extra" fields
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter.

    Produces single-line JSON logs with consistent structure.
    All timestamps are UTC.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        report_id = get_report_id()
        if report_id:
            log_entry["report_id"] = report_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields from the log call (e.g., logger.info("msg", extra={...}))
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; if False, use human-readable format

    Environment Variables:
        LOG_LEVEL: Override the log level
        LOG_FORMAT: Override format ("json" or "text")
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    json_format = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        # Human-readable format for local development
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    app_logger = logging.getLogger("bp_svc")
    app_logger.setLevel(level)
    app_logger.handlers = []  # Inherit from root
    app_logger.propagate = True

    # reportlab is chatty at DEBUG about font and image handling
    logging.getLogger("reportlab").setLevel(max(logging.getLevelName(level), logging.INFO))

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )


def setup_logging_from_settings(settings) -> None:
    """Configure logging from a Settings instance."""
    setup_logging(
        level=settings.bp_svc_log_level,
        json_format=settings.bp_svc_log_format.lower() == "json",
    )
