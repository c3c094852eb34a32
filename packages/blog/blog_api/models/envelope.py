"""Success/failure response envelope.

Every API response is exactly one of two shapes on the wire:

    { success: true,  data, meta?, message?, statusCode?, correlationId? }
    { success: false, statusCode, message?, correlationId?,
      error: { code, message, details?, fields? } }

Parsing is an explicit tagged union: the ``success`` tag must be a JSON
boolean, and the matching model is then validated. JSON that does not fit
either shape is rejected rather than guessed at.
"""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")
MetaT = TypeVar("MetaT")


class EnvelopeShapeError(ValueError):
    """Raised when a JSON payload is not a success or failure envelope."""


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ErrorBody(_WireModel):
    """Machine-readable error carried by a failure envelope."""

    code: str
    message: str
    details: Any = None
    fields: dict[str, list[str]] | None = None


class ApiSuccess(_WireModel, Generic[DataT, MetaT]):
    """Success envelope; ``data`` is the sole carrier of business payload."""

    model_config = ConfigDict(extra="allow")

    success: Literal[True] = True
    data: DataT | None = None
    meta: MetaT | None = None
    message: str | None = None
    status_code: int | None = None
    correlation_id: str | None = None


class ApiFailure(_WireModel):
    """Failure envelope; ``error.code`` is the stable identifier."""

    model_config = ConfigDict(extra="allow")

    success: Literal[False] = False
    status_code: int
    message: str | None = None
    correlation_id: str | None = None
    error: ErrorBody


ApiResponse = ApiSuccess[Any, Any] | ApiFailure


def parse_envelope(
    payload: Any,
    *,
    status_code: int | None = None,
) -> ApiSuccess[Any, Any] | ApiFailure:
    """Validate a decoded JSON payload as one of the two envelope shapes.

    ``status_code`` fills in a failure envelope that omits ``statusCode``
    (the transport status is the best available value).

    Raises
    ------
    EnvelopeShapeError
        If the payload has no boolean ``success`` tag or does not validate
        against the tagged model.
    """
    if not isinstance(payload, dict):
        raise EnvelopeShapeError(f"Expected a JSON object, got {type(payload).__name__}")

    tag = payload.get("success")
    if not isinstance(tag, bool):
        raise EnvelopeShapeError("Missing boolean 'success' tag")

    try:
        if tag:
            return ApiSuccess[Any, Any].model_validate(payload)
        if status_code is not None and "statusCode" not in payload and "status_code" not in payload:
            payload = {**payload, "statusCode": status_code}
        return ApiFailure.model_validate(payload)
    except ValidationError as exc:
        raise EnvelopeShapeError(str(exc)) from exc


def is_envelope(payload: Any) -> bool:
    """Non-raising check for ``parse_envelope``."""
    try:
        parse_envelope(payload, status_code=0)
    except EnvelopeShapeError:
        return False
    return True


def is_ok(response: ApiSuccess[Any, Any] | ApiFailure) -> bool:
    return response.success is True


def success_envelope(
    data: Any,
    *,
    meta: Any = None,
    message: str | None = None,
    status_code: int | None = None,
    correlation_id: str | None = None,
) -> ApiSuccess[Any, Any]:
    """Build a success envelope; optional keys are only set when given."""
    extra: dict[str, Any] = {}
    if meta is not None:
        extra["meta"] = meta
    if message is not None:
        extra["message"] = message
    if status_code is not None:
        extra["status_code"] = status_code
    if correlation_id is not None:
        extra["correlation_id"] = correlation_id
    return ApiSuccess[Any, Any](data=data, **extra)


def failure_envelope(
    status_code: int,
    code: str,
    message: str,
    *,
    details: Any = None,
    fields: dict[str, list[str]] | None = None,
    correlation_id: str | None = None,
) -> ApiFailure:
    """Build a failure envelope; optional keys are only set when given."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    if fields is not None:
        error["fields"] = fields

    extra: dict[str, Any] = {}
    if correlation_id is not None:
        extra["correlation_id"] = correlation_id
    return ApiFailure(status_code=status_code, error=ErrorBody(**error), **extra)


def to_wire(envelope: ApiSuccess[Any, Any] | ApiFailure) -> dict[str, Any]:
    """Dump an envelope to its camelCase JSON form, omitting unset keys."""
    wire = envelope.model_dump(mode="json", by_alias=True, exclude_unset=True)
    wire["success"] = envelope.success
    return wire
