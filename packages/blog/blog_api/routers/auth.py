"""OAuth callback endpoint guarding the admin area.

- GET /api/auth/callback: exchange the provider's ``code`` for a session,
  then admit only users whose email has a profile row.

The OAuth protocol itself is handled by the identity provider; this route
only decides where the browser goes next.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse

from blog_api.services.profiles import ProfileRepository, SessionProvider

logger = logging.getLogger(__name__)


def safe_redirect_target(redirect_to: str | None, admin_prefix: str = "/admin") -> str:
    """Only same-site admin paths are honoured; anything else goes to the admin root."""
    if redirect_to and redirect_to.startswith(admin_prefix):
        return redirect_to
    return admin_prefix


def create_auth_router(
    *,
    session_provider: SessionProvider,
    profile_repository: ProfileRepository,
    admin_prefix: str = "/admin",
    login_path: str = "/auth/login",
) -> APIRouter:
    """Factory that creates the auth router with injected dependencies."""

    router = APIRouter(prefix="/api/auth", tags=["auth"])

    def _reject(target: str) -> RedirectResponse:
        query = urlencode({"error": "unauthorized", "redirectTo": target})
        return RedirectResponse(f"{login_path}?{query}", status_code=307)

    @router.get("/callback")
    async def callback(
        request: Request,
        code: str | None = None,
        redirect_to: str | None = Query(default=None, alias="redirectTo"),
    ) -> RedirectResponse:
        target = safe_redirect_target(redirect_to, admin_prefix)

        if code:
            await session_provider.exchange_code_for_session(request, code)

        session = await session_provider.get_session(request)
        email = session.user.email if session else None

        if not email:
            logger.info("OAuth callback without a session email, signing out")
            await session_provider.sign_out(request)
            return _reject(target)

        profile = await profile_repository.get_profile_by_email(email)
        if profile is None:
            logger.warning("OAuth callback for an email with no profile, signing out")
            await session_provider.sign_out(request)
            return _reject(target)

        return RedirectResponse(target, status_code=307)

    return router
