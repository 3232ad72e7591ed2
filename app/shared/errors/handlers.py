"""
Centralized error handlers for FastAPI.

Maps taxonomy errors to HTTP responses through one table.
No stack traces or internal details are exposed to clients.
All error responses use the envelope {"error": {"code", "message"}}.
"""

import logging
import math
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.errors import DomainError, ErrorKind, RateLimited

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.AUTHENTICATION: (401, "UNAUTHORIZED"),
    ErrorKind.AUTHORIZATION: (403, "FORBIDDEN"),
    ErrorKind.VALIDATION: (400, "VALIDATION_ERROR"),
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.CONFLICT: (409, "CONFLICT"),
    ErrorKind.RATE_LIMITED: (429, "RATE_LIMIT_EXCEEDED"),
    ErrorKind.INTERNAL: (500, "INTERNAL_ERROR"),
}

GENERIC_INTERNAL_MESSAGE = "An internal error occurred"

HTTP_STATUS_CODES: dict[int, str] = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def envelope(code: str, message: str) -> dict[str, dict[str, str]]:
    """Build the failure body shared by every error response."""
    return {"error": {"code": code, "message": message}}


def _error_response(
    status_code: int,
    code: str,
    message: str,
    retry_after: Optional[int] = None,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(
        status_code=status_code, content=envelope(code, message), headers=headers
    )


def internal_error_response() -> JSONResponse:
    """The 500 envelope used for anything the taxonomy did not anticipate."""
    status_code, code = ERROR_STATUS[ErrorKind.INTERNAL]
    return _error_response(status_code, code, GENERIC_INTERNAL_MESSAGE)


def error_response(exc: DomainError) -> JSONResponse:
    """Translate a taxonomy error into its HTTP response.

    The status comes from the kind; a variant-specific code, when set,
    replaces the kind's default code. Internal failures never leak
    their message.
    """
    status_code, default_code = ERROR_STATUS[exc.kind]
    code = exc.code or default_code
    if exc.kind is ErrorKind.INTERNAL:
        return _error_response(status_code, code, GENERIC_INTERNAL_MESSAGE)
    retry_after = exc.retry_after_seconds if isinstance(exc, RateLimited) else None
    return _error_response(status_code, code, exc.message, retry_after=retry_after)


def _slowapi_retry_after(exc: RateLimitExceeded) -> int:
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is not None:
        return max(1, math.ceil(item.get_expiry()))
    return 60


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        """Map every taxonomy variant through ERROR_STATUS."""
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("Internal failure on %s: %s", request.url.path, exc.detail)
        else:
            logger.info(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc.message,
            )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Path and query parameter errors raised by FastAPI itself."""
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = f"{location}: {first.get('msg', 'invalid value')}"
        status_code, code = ERROR_STATUS[ErrorKind.VALIDATION]
        return _error_response(status_code, code, message)

    @app.exception_handler(RateLimitExceeded)
    async def handle_rate_limit_exceeded(
        request: Request, exc: RateLimitExceeded
    ) -> JSONResponse:
        """Default per-client limit enforced by slowapi on public reads."""
        logger.warning("Default rate limit exceeded on %s", request.url.path)
        return error_response(RateLimited(_slowapi_retry_after(exc), limit_class="default"))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing errors (unknown path, wrong method)."""
        code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for errors raised outside RequestContextMiddleware."""
        logger.exception(
            "Unexpected error on %s: %s", request.url.path, type(exc).__name__
        )
        return internal_error_response()
