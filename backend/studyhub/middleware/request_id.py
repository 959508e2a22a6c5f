"""
StudyHub Backend - Request ID Middleware
==========================================

What:  Tags every request with a short correlation id.
How:   Reuses the caller's X-Request-ID header when present (the web client
       sends one per user action), otherwise generates 8 hex chars. The id
       is stored in a ContextVar for loggers and exception handlers, on
       request.state for route handlers, and echoed in the X-Request-ID
       response header.

Error bodies carry the same id as `request_id`, so a support ticket with
the id from an error toast leads straight to the matching log lines.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
