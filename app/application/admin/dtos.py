"""
Data Transfer Objects for the admin application layer.
"""

from dataclasses import dataclass

from app.domain.access.entities import AuthenticatedCaller


@dataclass(frozen=True)
class UpdateUserStatusCommand:
    """Input DTO for enabling or disabling an account."""

    admin: AuthenticatedCaller
    user_id: str
    is_active: bool


@dataclass(frozen=True)
class ForceCloseJobCommand:
    """Input DTO for closing any job regardless of ownership."""

    admin: AuthenticatedCaller
    job_id: str
