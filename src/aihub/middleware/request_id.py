"""Request ID middleware for tracing a chat call across failover attempts."""

import re
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids are echoed into logs and headers
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def is_acceptable_request_id(value: str | None) -> bool:
    """Return True if a client-supplied request ID can be reused as is."""
    return bool(value) and REQUEST_ID_PATTERN.match(value) is not None


def generate_request_id() -> str:
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assigns every request an ID, reusing the caller's when well formed.

    The ID is stored on ``request.state.request_id`` and returned in the
    ``X-Request-ID`` response header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not is_acceptable_request_id(request_id):
            request_id = generate_request_id()

        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
