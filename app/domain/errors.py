"""
Error taxonomy shared by every bounded context.

Every guard, validator and use case fails with exactly one of the
variants defined here. Each variant is tagged with an ErrorKind and
carries structured fields (resource, detail) so the interface layer can
map it without inspecting messages.
No framework imports allowed.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure kinds understood by the boundary layer."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base error for all taxonomy variants.

    Attributes:
        message: Human readable message, safe to show to the caller.
        resource: Optional name of the resource involved (e.g. "job").
        detail: Optional server-side detail. Never sent to the caller.
        code: Optional machine-readable code overriding the kind default.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        resource: Optional[str] = None,
        detail: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        self.message = message
        self.resource = resource
        self.detail = detail
        self.code = code
        super().__init__(self.message)


class AuthenticationFailure(DomainError):
    """Raised when no authenticated caller is present."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(
        self,
        message: str = "Authentication required",
        *,
        detail: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message, detail=detail, code=code)


class AuthorizationFailure(DomainError):
    """Raised when the caller lacks a role or does not control a resource."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(
        self,
        message: str = "Insufficient permissions",
        *,
        resource: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, resource=resource, detail=detail)


class ValidationFailure(DomainError):
    """Raised when input or a requested state change is not acceptable."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, resource=field, detail=detail)
        self.field = field


class NotFound(DomainError):
    """Raised when a resource does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None) -> None:
        super().__init__(
            f"{resource.capitalize()} not found",
            resource=resource,
            detail=resource_id,
        )
        self.resource_id = resource_id


class Conflict(DomainError):
    """Raised when a write collides with existing state."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str,
        *,
        code: str = "CONFLICT",
        resource: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, resource=resource, detail=detail, code=code)


class RateLimited(DomainError):
    """Raised when a client exhausted its request budget for a window."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, retry_after_seconds: int, *, limit_class: Optional[str] = None) -> None:
        super().__init__(
            "Too many requests. Please try again later.",
            resource=limit_class,
        )
        self.retry_after_seconds = retry_after_seconds


class InternalFailure(DomainError):
    """Raised for unexpected failures. The message never leaves the server."""

    kind = ErrorKind.INTERNAL

    def __init__(self, detail: str) -> None:
        super().__init__("An internal error occurred", detail=detail)
