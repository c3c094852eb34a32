"""Session gate for the admin area.

Requests under the admin prefix need a session from the ``SessionProvider``;
without one the browser is redirected to the login page with a
``redirectTo`` parameter pointing back at the requested path. Every other
path passes through untouched.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse, Response

from blog_api.services.profiles import SessionProvider

logger = logging.getLogger(__name__)


def is_admin_path(path: str, prefix: str) -> bool:
    """True for ``prefix`` itself and anything below it."""
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


class AdminGateMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that redirects anonymous admin requests to login."""

    def __init__(
        self,
        app,  # noqa: ANN001
        session_provider: SessionProvider,
        admin_prefix: str = "/admin",
        login_path: str = "/auth/login",
    ) -> None:
        super().__init__(app)
        self._session_provider = session_provider
        self._admin_prefix = admin_prefix
        self._login_path = login_path

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not is_admin_path(request.url.path, self._admin_prefix):
            return await call_next(request)

        session = await self._session_provider.get_session(request)
        if session is None:
            logger.info(
                "Anonymous admin request redirected to login",
                extra={"path": request.url.path},
            )
            query = urlencode({"redirectTo": request.url.path})
            return RedirectResponse(f"{self._login_path}?{query}", status_code=307)

        return await call_next(request)
