"""
Port interfaces (ABCs) for the access bounded context.

Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.access.entities import AuthenticatedCaller, ResourceRef


class OwnershipResolver(ABC):
    """Port answering the two lookups ownership checks need."""

    @abstractmethod
    async def resolve_owning_company(self, resource: ResourceRef) -> Optional[str]:
        """Return the id of the company owning the resource.

        Jobs resolve through ``job.company_id``; applications resolve
        through their job. Returns None if the resource does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def company_owned_by(self, user_id: str) -> Optional[str]:
        """Return the id of the company owned by the user, or None."""
        raise NotImplementedError


class SessionResolver(ABC):
    """Port turning an opaque session token into the current caller."""

    @abstractmethod
    async def resolve(self, token: Optional[str]) -> Optional[AuthenticatedCaller]:
        """Return the caller for a live session, or None.

        Expired sessions and sessions of disabled users resolve to None.
        """
        raise NotImplementedError


class PasswordHasher(ABC):
    """Port for one-way password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when ``password`` matches ``password_hash``."""
        raise NotImplementedError
