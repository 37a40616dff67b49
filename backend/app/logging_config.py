"""
Structured JSON logging configuration.

Every entry is one JSON line on stdout, tagged with a channel:
- http: request start/finish with latency (request ID middleware), route
  boundary failures such as storage errors and unexpected exceptions
- registration: accepted and rejected registrations (rule that failed,
  duplicate email, lost insert race), keyed by student_id
- store: record file creation, collection saves, constraint rejections

The request ID of the current HTTP request is attached to every entry, so
a rejected registration can be traced from the http channel to the
registration channel.

Passwords and password hashes must never be passed as context or extra data.
Validation failures log the field name, never the submitted value.
"""

import logging
import json
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from app.config import LOG_LEVEL

# ──────────────────────────────────────────────────────────────
# Context variable to track request ID across async operations.
# Each incoming HTTP request gets a unique UUID, which is then
# attached to every log entry produced during that request.
# ──────────────────────────────────────────────────────────────
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

CHANNELS = ["http", "registration", "store"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Formatter that renders each record as one JSON object:
    timestamp, level, message, channel, context and extra.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging():
    """
    Configure the root logger and the channel loggers.

    All output goes to stdout through a single JSON handler.
    """
    formatter = StructuredJsonFormatter()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logger = logging.getLogger(f"app.{channel}")
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """
    Get a channel-specific logger.

    Args:
        channel: One of CHANNELS (http, registration, store)

    Returns:
        Logger named "app.<channel>", which the formatter reports as the channel
    """
    return logging.getLogger(f"app.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None,
                     exc_info=None):
    """
    Emit a structured log entry with business context and extra metadata.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (student_id, email)
        extra_data: Additional metadata dict (ip, duration_ms, path)
        exc_info: Optional exception to attach a traceback for
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        exc_info=exc_info,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
