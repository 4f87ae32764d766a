# src/todo_service/core/logging/middleware.py
"""
Request ID middleware for FastAPI / Starlette.

Each request is bound to a request id: the incoming `X-Request-ID` header when
the client (or an upstream proxy) sent one, a fresh uuid4 otherwise. The id is
stored in the contextvar read by `RequestIdFilter` for the duration of the
request and echoed back in the `X-Request-ID` response header.
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"
# Longer ids are replaced rather than written to the logs
MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request) -> str | None:
    rid = request.headers.get(REQUEST_ID_HEADER)
    if not rid or len(rid) > MAX_REQUEST_ID_LENGTH or not rid.isprintable():
        return None
    return rid


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Set the request id for each incoming request and add it to the response.
    """

    async def dispatch(self, request: Request, call_next):
        rid = _incoming_request_id(request) or str(uuid.uuid4())
        token = set_request_id(rid)

        try:
            # exceptions propagate to the framework's handlers
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
