"""Correlation ID middleware.

Generates (or propagates) a UUID correlation ID for every incoming request,
stores it in ``request.state.correlation_id``, and adds an
``X-Correlation-ID`` response header. Failure envelopes carry the same ID so
a client-side error can be matched to server logs.
"""

from __future__ import annotations

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that assigns a correlation ID to each request.

    If the incoming request already carries an ``X-Correlation-ID`` header
    the provided value is reused; otherwise a new UUID4 is generated.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        response: Response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
