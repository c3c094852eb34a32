"""In-memory broadcast bus feeding the development log stream.

Server-side log lines are pushed here and fanned out to every connected
Server-Sent Events client. Each client owns a bounded queue; a full or
broken client is skipped without affecting the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def format_event(message: str) -> str:
    """Encode one message as an SSE ``data:`` frame."""
    lines = message.splitlines() or [""]
    return "".join(f"data: {line}\n" for line in lines) + "\n"


KEEPALIVE_FRAME = ": ping\n\n"


@dataclass(eq=False)
class DevLogClient:
    """One subscribed stream."""

    queue: asyncio.Queue[str] = field(default_factory=lambda: asyncio.Queue(maxsize=100))

    def send(self, message: str) -> None:
        self.queue.put_nowait(message)


class DevLogBus:
    """Fan-out of log lines to subscribed clients.

    Parameters
    ----------
    enabled:
        When False (production), ``push`` is a no-op.
    queue_size:
        Per-client backlog before new lines are dropped for that client.
    """

    def __init__(self, enabled: bool = True, queue_size: int = 100) -> None:
        self._enabled = enabled
        self._queue_size = queue_size
        self._clients: set[DevLogClient] = set()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def subscribe(self) -> DevLogClient:
        client = DevLogClient(queue=asyncio.Queue(maxsize=self._queue_size))
        self._clients.add(client)
        return client

    def unsubscribe(self, client: DevLogClient) -> None:
        self._clients.discard(client)

    def push(self, message: str) -> int:
        """Send ``message`` to every client; returns how many received it."""
        if not self._enabled:
            return 0

        delivered = 0
        for client in list(self._clients):
            try:
                client.send(message)
            except asyncio.QueueFull:
                logger.debug("Dev log client backlog full, dropping line")
                continue
            delivered += 1
        return delivered
