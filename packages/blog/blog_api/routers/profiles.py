"""Profiles API endpoint.

- GET /api/profiles: all profiles, newest first, as a success envelope
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from blog_api.config.settings import BlogSettings
from blog_api.middleware.error_handler import ProfilesFetchError
from blog_api.models.envelope import success_envelope, to_wire
from blog_api.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)


def create_profiles_router(
    *,
    profile_repository: ProfileRepository,
    settings: BlogSettings,
) -> APIRouter:
    """Factory that creates the profiles router with injected dependencies.

    Repository error text reaches the client only in development.
    """

    router = APIRouter(prefix="/api", tags=["profiles"])

    @router.get("/profiles")
    async def list_profiles() -> dict:
        try:
            profiles = await profile_repository.list_profiles()
        except Exception as exc:
            logger.error("Profile query failed: %s", exc)
            detail = str(exc) if settings.is_development else ""
            raise ProfilesFetchError(detail or None) from exc

        rows = [profile.model_dump(mode="json", by_alias=True) for profile in profiles]
        return to_wire(success_envelope(rows))

    return router
