"""Development log stream: in-memory bus behind the SSE endpoint."""

from functools import lru_cache

from blog_api.config.settings import get_settings
from blog_api.devlog.bus import KEEPALIVE_FRAME, DevLogBus, DevLogClient, format_event


@lru_cache(maxsize=1)
def get_dev_log_bus() -> DevLogBus:
    """Process-wide bus; enabled only in development."""
    settings = get_settings()
    return DevLogBus(
        enabled=settings.is_development,
        queue_size=settings.dev_log_queue_size,
    )


__all__ = [
    "KEEPALIVE_FRAME",
    "DevLogBus",
    "DevLogClient",
    "format_event",
    "get_dev_log_bus",
]
