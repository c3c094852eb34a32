"""Normalized API error and the error-code taxonomy.

``ApiError`` is the single throwable the client layer surfaces. It is built
1:1 from a failure envelope and exposes the envelope's fields read-only.
"""

from __future__ import annotations

from typing import Any

from blog_api.models.envelope import ApiFailure, ApiSuccess, is_ok

# Non-2xx status with no response body.
EMPTY_ERROR_BODY = "EMPTY_ERROR_BODY"
# Body present but not parseable as JSON.
INVALID_JSON = "INVALID_JSON"
# HTTP failure status but the body claims success.
UPSTREAM_INCONSISTENT = "UPSTREAM_INCONSISTENT"
# JSON body that does not match the envelope.
UPSTREAM_JSON_ERROR = "UPSTREAM_JSON_ERROR"
# Non-JSON failure body (HTML error pages, plain text).
UPSTREAM_TEXT_ERROR = "UPSTREAM_TEXT_ERROR"
# Network failure, abort, timeout or programming error.
UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ApiError(Exception):
    """Failure envelope raised as an exception.

    The message falls back from ``error.message`` to the top-level
    ``message`` and finally to a generic "API Error".
    """

    def __init__(self, failure: ApiFailure) -> None:
        self._failure = failure
        super().__init__(failure.error.message or failure.message or "API Error")

    @property
    def failure(self) -> ApiFailure:
        return self._failure

    @property
    def message(self) -> str:
        return str(self.args[0])

    @property
    def code(self) -> str:
        return self._failure.error.code

    @property
    def status_code(self) -> int:
        return self._failure.status_code

    @property
    def correlation_id(self) -> str | None:
        return self._failure.correlation_id

    @property
    def details(self) -> Any:
        return self._failure.error.details

    @property
    def fields(self) -> dict[str, list[str]] | None:
        return self._failure.error.fields

    def __repr__(self) -> str:
        return (
            f"ApiError(code={self.code!r}, status_code={self.status_code!r}, "
            f"message={self.message!r})"
        )


def ensure_ok(response: ApiSuccess[Any, Any] | ApiFailure) -> ApiSuccess[Any, Any]:
    """Return the success envelope, or raise ``ApiError`` for a failure."""
    if is_ok(response):
        return response  # type: ignore[return-value]
    raise ApiError(response)  # type: ignore[arg-type]


def unwrap(response: ApiSuccess[Any, Any] | ApiFailure) -> Any:
    """Return only ``data`` from a success envelope."""
    return ensure_ok(response).data
