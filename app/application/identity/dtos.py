"""
Data Transfer Objects for the identity application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass

from app.domain.access.entities import Role
from app.domain.hiring.entities import Session, User


@dataclass(frozen=True)
class SignUpCommand:
    """Input DTO for creating an account.

    Attributes:
        email: Login email; stored lower-cased.
        password: Plain text password, at least 8 characters.
        role: USER or EMPLOYER. ADMIN accounts are never self-created.
    """

    email: str
    password: str
    role: Role = Role.USER


@dataclass(frozen=True)
class LoginCommand:
    """Input DTO for opening a session."""

    email: str
    password: str


@dataclass(frozen=True)
class LoginResult:
    """Output DTO of a successful login."""

    user: User
    session: Session
