"""Convert anything raised by an HTTP call into an ``ApiError``.

HTTP status errors keep as much of the upstream body as possible:

- a failure envelope is used verbatim;
- a success envelope under a failure status becomes UPSTREAM_INCONSISTENT;
- other JSON becomes UPSTREAM_JSON_ERROR;
- text/HTML (or JSON that does not parse) becomes UPSTREAM_TEXT_ERROR.

Everything else (network errors, timeouts, programming errors) becomes
UNKNOWN_ERROR with status 0. The original exception is always chained as
``__cause__``.
"""

from __future__ import annotations

import logging

import httpx

from blog_api.integration.api_error import (
    UNKNOWN_ERROR,
    UPSTREAM_INCONSISTENT,
    UPSTREAM_JSON_ERROR,
    UPSTREAM_TEXT_ERROR,
    ApiError,
)
from blog_api.integration.response_parser import loads_json, upstream_json_message
from blog_api.models.envelope import (
    ApiFailure,
    EnvelopeShapeError,
    failure_envelope,
    parse_envelope,
)

logger = logging.getLogger(__name__)

TEXT_MESSAGE_LIMIT = 500


async def _read_text(response: httpx.Response) -> str:
    """Body text of ``response``; an unreadable body counts as empty.

    ``aread`` caches the content on the response, so the body stays
    readable for anyone else holding it.
    """
    try:
        await response.aread()
        return response.text
    except (httpx.StreamError, httpx.TransportError) as exc:
        logger.debug("Could not read error response body: %s", exc)
        return ""


def _failure_from_text(status: int, raw_text: str, details: dict) -> ApiFailure:
    message = raw_text.strip()
    return failure_envelope(
        status,
        UPSTREAM_TEXT_ERROR,
        message[:TEXT_MESSAGE_LIMIT] if message else "Upstream error",
        details=details,
    )


async def failure_from_http_error(error: httpx.HTTPStatusError) -> ApiFailure:
    """Build the failure envelope that best describes an HTTP status error."""
    response = error.response
    status = response.status_code
    details = {"url": str(error.request.url), "statusText": response.reason_phrase}
    content_type = response.headers.get("content-type", "")

    raw_text = await _read_text(response)

    if "application/json" not in content_type:
        return _failure_from_text(status, raw_text, details)

    try:
        body = loads_json(raw_text)
    except ValueError:
        return _failure_from_text(status, raw_text, details)

    try:
        envelope = parse_envelope(body, status_code=status)
    except EnvelopeShapeError:
        return failure_envelope(
            status,
            UPSTREAM_JSON_ERROR,
            upstream_json_message(body),
            details={**details, "body": body},
        )

    if isinstance(envelope, ApiFailure):
        return envelope

    return failure_envelope(
        status,
        UPSTREAM_INCONSISTENT,
        "HTTP failed but body indicates success",
        details={**details, "body": body},
    )


def _unknown(error: BaseException) -> ApiError:
    failure = failure_envelope(
        0,
        UNKNOWN_ERROR,
        str(error) or "Unknown error",
        details=error,
    )
    api_error = ApiError(failure)
    api_error.__cause__ = error
    return api_error


async def to_api_error_async(error: BaseException) -> ApiError:
    """Normalize ``error``, reading the response body of HTTP status errors."""
    if isinstance(error, ApiError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        api_error = ApiError(await failure_from_http_error(error))
        api_error.__cause__ = error
        return api_error

    return _unknown(error)


def to_api_error(error: BaseException) -> ApiError:
    """Synchronous normalizer for contexts that cannot await.

    Response bodies are never read here, so HTTP status errors lose their
    upstream detail; prefer ``to_api_error_async``.
    """
    if isinstance(error, ApiError):
        return error
    return _unknown(error)
