"""JSON log output and reporting of client-side API errors.

Every record is rendered as one JSON object carrying timestamp, level,
logger name, message and correlation_id. ``log_api_error`` attaches the
normalized error's code, status, details and fields as extras, and the
formatter copies them into the entry when present.

Credential-like ``key=value`` pairs (tokens, cookies, passwords,
authorization headers) are masked in messages and tracebacks.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import IO

from blog_api.config.settings import BlogSettings, get_settings
from blog_api.devlog import get_dev_log_bus
from blog_api.integration.api_error import ApiError

logger = logging.getLogger("blog_api.api_errors")

_REDACTED = "[REDACTED]"
_SENSITIVE_PAIR = re.compile(
    r"(?:api.key|secret|password|token|cookie|authorization)\s*[=:]\s*[^\s&,]+",
    re.IGNORECASE,
)

# Extras copied from the record into the JSON entry.
_API_ERROR_FIELDS = ("error_code", "status_code", "details", "fields", "cause")


def redact(text: str) -> str:
    """Mask credential-like pairs in ``text``."""
    return _SENSITIVE_PAIR.sub(_REDACTED, text)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Values that are not JSON serialisable (exceptions, UUIDs) fall back to
    ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
            "correlation_id": getattr(record, "correlation_id", None),
        }
        entry.update(
            (name, getattr(record, name))
            for name in _API_ERROR_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", stream: IO[str] | None = None) -> None:
    """Send all logging through a single JSON handler.

    Parameters
    ----------
    level:
        Level name; unknown names fall back to INFO.
    stream:
        Output stream, stderr by default.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))


def summarize_error(error: BaseException | object) -> str:
    """One-line summary pushed to the dev log stream."""
    if isinstance(error, ApiError):
        return f"[ApiError] code={error.code or '-'} status={error.status_code} msg={error.message}"
    return f"[Unknown] {error}"


def log_api_error(error: BaseException | object, *, settings: BlogSettings | None = None) -> None:
    """Log a caught client error, with more detail in development.

    Callers decide what happens next (re-raise, fall back, translate);
    this only records the failure. In development the one-line summary is
    also streamed to the dev log bus.
    """
    settings = settings or get_settings()

    if isinstance(error, ApiError):
        extra = {
            "error_code": error.code,
            "status_code": error.status_code,
            "correlation_id": error.correlation_id,
            "details": error.details,
            "fields": error.fields,
        }
        if settings.is_development and error.__cause__ is not None:
            extra["cause"] = repr(error.__cause__)
        logger.error("ApiError: %s", error.message, extra=extra)
    elif settings.is_development:
        logger.error("Unknown error: %r", error)
    else:
        logger.error("Unknown error: %s", type(error).__name__)

    if settings.is_development:
        get_dev_log_bus().push(summarize_error(error))
