"""Configuration module: settings and API origin resolution."""

from blog_api.config.settings import (
    API_ORIGIN_ENV_VARS,
    BlogSettings,
    get_settings,
    resolve_api_origin,
)

__all__ = [
    "API_ORIGIN_ENV_VARS",
    "BlogSettings",
    "get_settings",
    "resolve_api_origin",
]
