"""
Request context and secure HTTP headers middleware.

For every request:
- assigns a correlation id (echoing a sane inbound X-Request-ID)
- adds security-related headers to the response
- logs method, path, status and duration

No business logic. Pure cross-cutting concern.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.shared.errors.handlers import internal_error_response
from app.shared.logging import log_request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,128}")

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'",
    "X-XSS-Protection": "1; mode=block",
}


def _request_id(request: Request) -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER)
    if inbound and REQUEST_ID_PATTERN.fullmatch(inbound):
        return inbound
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that tags, secures and logs every request.

    The request id is stored on ``request.state.request_id`` so guards
    and handlers can correlate their own log lines with it.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and decorate the response."""
        request_id = _request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            # A 500 still carries the request id and secure headers.
            logger.exception(
                "Unexpected error on %s %s [request_id=%s]",
                request.method,
                request.url.path,
                request_id,
            )
            response = internal_error_response()

        response.headers[REQUEST_ID_HEADER] = request_id
        for header_name, header_value in SECURE_HEADERS.items():
            response.headers[header_name] = header_value

        log_request(
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            user_id=getattr(request.state, "caller_id", None),
        )
        return response
