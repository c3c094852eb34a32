"""Public models for the blog API layer."""

from blog_api.models.envelope import (
    ApiFailure,
    ApiResponse,
    ApiSuccess,
    EnvelopeShapeError,
    ErrorBody,
    failure_envelope,
    is_envelope,
    is_ok,
    parse_envelope,
    success_envelope,
    to_wire,
)
from blog_api.models.profiles import Profile, ProfileRole, Session, SessionUser

__all__ = [
    "ApiFailure",
    "ApiResponse",
    "ApiSuccess",
    "EnvelopeShapeError",
    "ErrorBody",
    "Profile",
    "ProfileRole",
    "Session",
    "SessionUser",
    "failure_envelope",
    "is_envelope",
    "is_ok",
    "parse_envelope",
    "success_envelope",
    "to_wire",
]
