"""
Synapse API — Request ID Middleware
=====================================

What:  Gives every request a correlation ID and echoes it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID (trimmed to 64 chars) or
       generates a short one, stores it in a ContextVar for loggers and
       exception handlers, and in request.state for route handlers.
Who:   Applied to every request via Starlette middleware.

The ID also appears as `request_id` in every JSON error body, so a user
reporting an error can hand support the exact value to grep for.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        rid = incoming[:MAX_REQUEST_ID_LENGTH] or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
