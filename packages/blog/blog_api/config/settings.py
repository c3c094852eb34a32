"""Pydantic Settings for the blog API layer.

All environment variables use the BLOG_ prefix.
Example: BLOG_ENVIRONMENT=production, BLOG_API_TIMEOUT_SECONDS=5

The API origin is resolved separately from a priority-ordered list of
candidate variables (see ``resolve_api_origin``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

# Candidate origin variables, highest priority first.
API_ORIGIN_ENV_VARS: tuple[str, ...] = (
    "BLOG_API_ORIGIN",
    "BLOG_API_BASE_URL",
    "BLOG_SITE_URL",
    "SUPABASE_URL",
)

SERVER_DEFAULT_ORIGIN = "http://localhost:3000"


def resolve_api_origin(
    environ: Mapping[str, str] | None = None,
    *,
    server: bool = True,
) -> str:
    """Pick the origin outbound API calls are made against.

    The first non-empty candidate variable wins; ``VERCEL_URL`` is a bare host
    and gets an ``https://`` scheme. With nothing set, a server context falls
    back to ``http://localhost:3000`` and a browser-like context to a relative
    path (empty prefix).
    """
    env = os.environ if environ is None else environ

    for name in API_ORIGIN_ENV_VARS:
        value = env.get(name)
        if value:
            return value

    vercel_host = env.get("VERCEL_URL")
    if vercel_host:
        return f"https://{vercel_host}"

    return SERVER_DEFAULT_ORIGIN if server else ""


class BlogSettings(BaseSettings):
    """Blog API configuration validated from environment variables."""

    # Service
    environment: Literal["development", "production"] = "development"
    port: int = 3000
    log_level: str = "INFO"

    # Outbound API client
    api_timeout_seconds: float = Field(default=10.0, gt=0)
    api_default_headers: dict[str, str] = {}

    # Admin gate
    admin_path_prefix: str = "/admin"
    login_path: str = "/auth/login"

    # Dev log stream
    dev_log_keepalive_seconds: float = Field(default=30.0, gt=0)
    dev_log_queue_size: int = Field(default=100, ge=1)

    model_config = {"env_prefix": "BLOG_"}

    @property
    def is_development(self) -> bool:
        return self.environment != "production"


@lru_cache(maxsize=1)
def get_settings() -> BlogSettings:
    """Process-wide settings, read once from the environment."""
    return BlogSettings()
