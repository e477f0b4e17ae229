"""
MedTrack Backend: Request ID Middleware
=========================================

What:  Assigns a short correlation ID to each request and returns it in X-Request-ID.
How:   Reuses the client's X-Request-ID header when present, otherwise generates
       one; stores it in a ContextVar for loggers and error handlers.

The mobile client can send its own ID so a failed "Add Medicine" tap can be
matched to the server log line that explains it.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Stores the request ID in request.state and request_id_var."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate log lines
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
