"""FastAPI application factory with lifespan management.

Startup: configure JSON logging from settings.
The database and identity provider are injected by the caller, so the app
itself holds no connection state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from blog_api.config.settings import BlogSettings, get_settings
from blog_api.devlog import get_dev_log_bus
from blog_api.devlog.bus import DevLogBus
from blog_api.logging_config import configure_logging
from blog_api.middleware.admin_gate import AdminGateMiddleware
from blog_api.middleware.correlation_id import CorrelationIdMiddleware
from blog_api.middleware.error_handler import register_error_handlers
from blog_api.routers.auth import create_auth_router
from blog_api.routers.dev_logs import create_dev_logs_router
from blog_api.routers.profiles import create_profiles_router
from blog_api.services.profiles import ProfileRepository, SessionProvider

logger = logging.getLogger(__name__)


def create_app(
    settings: BlogSettings | None = None,
    *,
    profile_repository: ProfileRepository,
    session_provider: SessionProvider,
    dev_log_bus: DevLogBus | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    bus = dev_log_bus or get_dev_log_bus()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        logger.info(
            "Starting blog API (%s) on port %d", settings.environment, settings.port
        )
        yield
        logger.info("Blog API shut down")

    app = FastAPI(title="Blog API", version="1.0.0", lifespan=lifespan)

    register_error_handlers(app)

    app.include_router(
        create_profiles_router(profile_repository=profile_repository, settings=settings)
    )
    app.include_router(
        create_auth_router(
            session_provider=session_provider,
            profile_repository=profile_repository,
            admin_prefix=settings.admin_path_prefix,
            login_path=settings.login_path,
        )
    )
    app.include_router(create_dev_logs_router(bus=bus, settings=settings))

    # Middleware (order: correlation_id → admin gate)
    # Note: Starlette middleware is applied in reverse order of add_middleware calls
    app.add_middleware(
        AdminGateMiddleware,
        session_provider=session_provider,
        admin_prefix=settings.admin_path_prefix,
        login_path=settings.login_path,
    )
    app.add_middleware(CorrelationIdMiddleware)

    return app
