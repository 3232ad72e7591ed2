"""
Domain entities for the access bounded context.

They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(Enum):
    """Platform role. Higher rank includes every capability of lower ranks."""

    USER = "USER"
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"

    @property
    def rank(self) -> int:
        """Position of the role in the hierarchy (USER=1 < EMPLOYER=2 < ADMIN=3)."""
        return ROLE_RANKS[self]


ROLE_RANKS: dict[Role, int] = {
    Role.USER: 1,
    Role.EMPLOYER: 2,
    Role.ADMIN: 3,
}


@dataclass(frozen=True)
class AuthenticatedCaller:
    """The caller of the current request, resolved once from its session."""

    id: str
    email: str
    role: Role
    is_active: bool = True
    email_verified: bool = False


class ResourceKind(Enum):
    """Kinds of resources reachable from a caller through a company."""

    JOB = "job"
    APPLICATION = "application"


@dataclass(frozen=True)
class ResourceRef:
    """Identifier of a resource whose owning company must be looked up."""

    kind: ResourceKind
    id: str


@dataclass(frozen=True)
class OwnedResource:
    """A resource already joined with its owning company.

    Passing this shape to the ownership guard skips the owning-company
    lookup. ``company_id`` is None when the resource does not exist.
    """

    kind: ResourceKind
    id: str
    company_id: Optional[str]
