"""Development-only log stream.

- GET /api/_dev-logs: Server-Sent Events relay of the dev log bus

Returns 404 outside development. Idle connections receive a ``: ping``
comment frame every ``dev_log_keepalive_seconds``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from blog_api.config.settings import BlogSettings
from blog_api.devlog.bus import KEEPALIVE_FRAME, DevLogBus, format_event
from blog_api.middleware.error_handler import NotFoundError

CONNECTED_MESSAGE = "Connected to dev log stream"

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def stream_dev_logs(
    request: Request,
    bus: DevLogBus,
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    """Yield SSE frames until the client disconnects."""
    client = bus.subscribe()
    try:
        yield format_event(CONNECTED_MESSAGE)
        while not await request.is_disconnected():
            try:
                message = await asyncio.wait_for(client.queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield KEEPALIVE_FRAME
                continue
            yield format_event(message)
    finally:
        bus.unsubscribe(client)


def create_dev_logs_router(*, bus: DevLogBus, settings: BlogSettings) -> APIRouter:
    """Factory that creates the dev log router with injected dependencies."""

    router = APIRouter(prefix="/api", tags=["dev-logs"])

    @router.get("/_dev-logs")
    async def dev_logs(request: Request) -> StreamingResponse:
        if not settings.is_development:
            raise NotFoundError("Not available in production")

        return StreamingResponse(
            stream_dev_logs(request, bus, settings.dev_log_keepalive_seconds),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return router
