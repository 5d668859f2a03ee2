"""Request ID middleware for request tracing.

Propagates an incoming ``X-Request-ID`` or generates one, stores it on
``request.state`` and binds it to the logging context so every log line of
an extraction carries it.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipe_extraction.observability.logging import bind_context, clear_context


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to the request, the logs and the response."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add request ID."""
        # Nothing from a previous request may leak into this one
        clear_context()

        # Reuse the caller's ID when present
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_context(request_id=request_id)

        # Process request
        response = await call_next(request)

        # Echo the ID for client-side correlation
        response.headers[self.header_name] = request_id
        return response
