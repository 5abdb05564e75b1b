"""
WordLog Backend — Request ID Middleware
========================================

What:  Assigns an ID to each incoming request and echoes it in the response.
Why:   Lets a client quote the ID from an error body and lets us find every
       log line for that request.
How:   Reuses the client's X-Request-ID header if present, otherwise generates
       a short UUID; stores it in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request/response pair with a correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is plenty for correlating log lines
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
