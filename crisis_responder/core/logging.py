"""
CrisisAI Responder - Structured Logging

Provides JSON or human-readable log output with a per-request id injected
from context. Free-text emergency descriptions are truncated before they
reach structured log data.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional


# =============================================================================
# Context Variables
# =============================================================================

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


# =============================================================================
# Masking Utilities
# =============================================================================

def truncate_text(text: Optional[str], limit: int = 80) -> str:
    """Shorten free text for log output."""
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."


def mask_sensitive_data(data: dict) -> dict:
    """
    Recursively shorten free-text fields in a dictionary.

    Fields named message, transcript or text are truncated.
    """
    text_keys = {"message", "transcript", "text"}

    masked = {}
    for key, value in data.items():
        if key.lower() in text_keys and isinstance(value, str):
            masked[key] = truncate_text(value)
        elif isinstance(value, dict):
            masked[key] = mask_sensitive_data(value)
        else:
            masked[key] = value

    return masked


# =============================================================================
# Formatters
# =============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter that injects the request id.

    Output format:
    {
        "timestamp": "2024-11-30T00:00:00.000000+00:00",
        "level": "INFO",
        "logger": "module.submodule",
        "request_id": "req_abc123",
        "message": "Human-readable message",
        "data": { ... }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_entry["request_id"] = request_id

        if hasattr(record, "data") and record.data:
            log_entry["data"] = mask_sensitive_data(record.data)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        request_id = request_id_var.get()
        context_str = f" [req={request_id}]" if request_id else ""

        message = f"{timestamp} | {record.levelname:<8} | {record.name}{context_str} | {record.getMessage()}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


# =============================================================================
# Logger Setup
# =============================================================================

def setup_structured_logging(
    level: str = "INFO",
    json_format: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON format (True for production, False for development)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter())

    root_logger.addHandler(handler)

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


# =============================================================================
# Context Manager
# =============================================================================

class LogContext:
    """
    Context manager that binds a request id to log lines.

    Usage:
        with LogContext(request_id="abc123"):
            logger.info("Processing request")
    """

    def __init__(self, request_id: Optional[str] = None):
        self._request_id = request_id
        self._token = None

    def __enter__(self):
        if self._request_id:
            self._token = request_id_var.set(self._request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            request_id_var.reset(self._token)
            self._token = None
        return False
