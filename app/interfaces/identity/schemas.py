"""
Pydantic schemas for authentication requests and responses.

Email format and password length are business rules checked by the
sign-up use case; the schemas only bound the raw input.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from app.domain.access.entities import Role
from app.interfaces.schemas import RequestModel, ResponseModel


class SignUpRequest(RequestModel):
    """Request schema for account creation.

    Attributes:
        email: Login email.
        password: Plain text password (at least 8 characters).
        role: USER or EMPLOYER.
    """

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)
    role: Literal["USER", "EMPLOYER"] = "USER"


class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(ResponseModel):
    """Public view of an account. Never includes the password hash."""

    id: str
    email: str
    role: Role
    is_active: bool
    email_verified: bool
    created_at: datetime


class SessionResponse(ResponseModel):
    """Response of a successful login.

    The token is also set as an HttpOnly cookie; API clients may send it
    back as a Bearer token instead.
    """

    message: str
    user: UserResponse
    token: str
    expires_at: datetime
