"""
Role-based access control guards.

Each guard takes the (possibly missing) caller and returns it unchanged
when authorized, so guards chain naturally:

    caller = require_employer(caller)

Role checks go through rank comparison only. No other module may branch
on a specific role to decide "at least this role".
"""

from typing import Optional

from app.domain.access.entities import AuthenticatedCaller, Role
from app.domain.errors import AuthenticationFailure, AuthorizationFailure


def require_authenticated(caller: Optional[AuthenticatedCaller]) -> AuthenticatedCaller:
    """Require a caller to be present.

    Raises:
        AuthenticationFailure: If there is no caller.
    """
    if caller is None:
        raise AuthenticationFailure("You must be logged in to access this resource")
    return caller


def require_at_least(caller: Optional[AuthenticatedCaller], role: Role) -> AuthenticatedCaller:
    """Require the caller's role to rank at least as high as ``role``.

    Raises:
        AuthenticationFailure: If there is no caller.
        AuthorizationFailure: If the caller's role ranks lower.
    """
    authenticated = require_authenticated(caller)
    if authenticated.role.rank < role.rank:
        raise AuthorizationFailure(
            f"{role.value.capitalize()} role required to perform this action",
            detail=f"caller role {authenticated.role.value}",
        )
    return authenticated


def require_user(caller: Optional[AuthenticatedCaller]) -> AuthenticatedCaller:
    """Any authenticated caller."""
    return require_at_least(caller, Role.USER)


def require_employer(caller: Optional[AuthenticatedCaller]) -> AuthenticatedCaller:
    """EMPLOYER or ADMIN."""
    return require_at_least(caller, Role.EMPLOYER)


def require_admin(caller: Optional[AuthenticatedCaller]) -> AuthenticatedCaller:
    """ADMIN only."""
    return require_at_least(caller, Role.ADMIN)


def has_role(caller: Optional[AuthenticatedCaller], role: Role) -> bool:
    """Boolean form of require_at_least, for conditional display logic."""
    return caller is not None and caller.role.rank >= role.rank
