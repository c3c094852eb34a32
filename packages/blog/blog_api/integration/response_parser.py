"""Raw HTTP response → envelope.

Tolerates empty bodies and invalid JSON: both become failure envelopes
instead of exceptions. The text-level transform is pure and deterministic;
``parse_api_response`` only adds reading the body of an ``httpx.Response``.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from blog_api.integration.api_error import (
    EMPTY_ERROR_BODY,
    INVALID_JSON,
    UPSTREAM_JSON_ERROR,
)
from blog_api.models.envelope import (
    ApiFailure,
    ApiSuccess,
    EnvelopeShapeError,
    failure_envelope,
    parse_envelope,
)

RAW_EXCERPT_LIMIT = 200


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def loads_json(text: str) -> Any:
    """``json.loads`` without the NaN and Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def upstream_json_message(body: Any, default: str = "Upstream JSON error") -> str:
    """Best human-readable message in a non-envelope JSON body."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
        if isinstance(body.get("message"), str) and body["message"]:
            return body["message"]
    return default


def parse_response_text(
    text: str,
    *,
    status_code: int,
    url: str = "",
    reason: str = "",
) -> ApiSuccess[Any, Any] | ApiFailure:
    """Convert a response body into an envelope."""
    if not text:
        if 200 <= status_code < 300:
            return ApiSuccess[Any, Any](data=None, status_code=status_code)
        return failure_envelope(
            status_code,
            EMPTY_ERROR_BODY,
            "Empty response body",
            details={"url": url, "statusText": reason},
        )

    try:
        body = loads_json(text)
    except ValueError:
        return failure_envelope(
            status_code,
            INVALID_JSON,
            "Response is not valid JSON",
            details={"url": url, "raw": text[:RAW_EXCERPT_LIMIT]},
        )

    try:
        return parse_envelope(body, status_code=status_code)
    except EnvelopeShapeError:
        return failure_envelope(
            status_code,
            UPSTREAM_JSON_ERROR,
            upstream_json_message(body),
            details={"url": url, "statusText": reason, "body": body},
        )


async def parse_api_response(response: httpx.Response) -> ApiSuccess[Any, Any] | ApiFailure:
    """Read ``response`` once and convert its body into an envelope."""
    await response.aread()
    return parse_response_text(
        response.text,
        status_code=response.status_code,
        url=str(response.request.url) if _has_request(response) else "",
        reason=response.reason_phrase,
    )


def _has_request(response: httpx.Response) -> bool:
    try:
        response.request
    except RuntimeError:
        return False
    return True
