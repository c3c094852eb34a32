"""Middleware package: error hierarchy, admin gate, and correlation ID."""

from blog_api.middleware.admin_gate import AdminGateMiddleware
from blog_api.middleware.correlation_id import CorrelationIdMiddleware
from blog_api.middleware.error_handler import (
    BlogError,
    NotFoundError,
    ProfilesFetchError,
    register_error_handlers,
)

__all__ = [
    "AdminGateMiddleware",
    "BlogError",
    "CorrelationIdMiddleware",
    "NotFoundError",
    "ProfilesFetchError",
    "register_error_handlers",
]
