"""Global error hierarchy and FastAPI exception handlers.

All blog-specific errors extend BlogError. The FastAPI exception handlers
catch these errors (plus Pydantic's RequestValidationError, upstream
ApiErrors and unhandled exceptions) and return a failure envelope:
{ success: false, statusCode, correlationId, error: { code, message, ... } }.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blog_api.integration.api_error import ApiError
from blog_api.models.envelope import failure_envelope, to_wire

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class BlogError(Exception):
    """Base error for all blog-specific errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ProfilesFetchError(BlogError):
    """Profile list could not be loaded."""

    status_code = 500
    code = "PROFILES_FETCH_ERROR"
    message = "Failed to load profiles"


class NotFoundError(BlogError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


def _envelope(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    *,
    details: object = None,
    fields: dict[str, list[str]] | None = None,
) -> JSONResponse:
    """Build a failure envelope response."""
    failure = failure_envelope(
        status_code,
        code,
        message,
        details=details,
        fields=fields,
        correlation_id=_correlation_id(request),
    )
    return JSONResponse(status_code=status_code, content=to_wire(failure))


async def _blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    """Handle BlogError subclasses."""
    details = exc.details if exc.details else None
    return _envelope(request, exc.status_code, exc.code, exc.message, details=details)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI / Pydantic RequestValidationError (422)."""
    fields: dict[str, list[str]] = {}
    for err in exc.errors():
        path = ".".join(str(loc) for loc in err["loc"])
        fields.setdefault(path, []).append(err["msg"])
    return _envelope(request, 422, "VALIDATION_ERROR", "Validation error", fields=fields)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Re-emit an upstream failure; transport-level failures become 502."""
    status_code = exc.status_code if exc.status_code >= 400 else 502
    logger.warning("Upstream API error %s (status %d): %s", exc.code, exc.status_code, exc.message)
    return _envelope(request, status_code, exc.code, exc.message, fields=exc.fields)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log traceback, return generic 500."""
    logger.error("Unhandled exception: %s", exc, exc_info=exc)
    return _envelope(request, 500, "INTERNAL_ERROR", "Internal server error")


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(BlogError, _blog_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ApiError, _api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
