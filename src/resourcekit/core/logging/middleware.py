"""
Request ID middleware for FastAPI / Starlette.

Each request gets an id stored in the request-id contextvar (see filters.py)
for the duration of the request and echoed in the `X-Request-ID` response
header.

An incoming `X-Request-ID` is reused only when it looks like an opaque token
(letters, digits, `-`, `_`, `.`, at most 64 chars); anything else is replaced
by a fresh UUID4 so headers cannot inject text into log lines.

    app.add_middleware(RequestIDMiddleware)
"""

import re
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
