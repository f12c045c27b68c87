"""Correlation ids for requests.

The chat UI may send its own X-Request-ID so a message can be traced in
server logs; otherwise a UUID4 is minted. Either way the id is stored on
``request.state`` and echoed back.
"""

import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def resolve_request_id(incoming: str) -> str:
    """Client-supplied id (truncated), or a fresh UUID4 when blank."""
    incoming = incoming.strip()
    if not incoming:
        return str(uuid.uuid4())
    return incoming[:MAX_REQUEST_ID_LENGTH]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response
