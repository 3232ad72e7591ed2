"""
Domain service: ownership guards.

Ownership checks complement RBAC, they never replace it. Callers must
already have passed an RBAC guard before reaching this module, because
every non-admin check performs repository lookups.

Rules:
    - ADMIN controls every resource; the override is checked first and
      skips all lookups.
    - A resource belongs to the caller when the caller owns the company
      that owns the resource (Job -> Company -> owner).
    - A caller may not act on their own resource where the operation
      forbids it (e.g. applying to one's own job posting).
"""

import logging
from typing import Optional, Union

from app.domain.access.entities import (
    AuthenticatedCaller,
    OwnedResource,
    ResourceRef,
    Role,
)
from app.domain.access.ports import OwnershipResolver
from app.domain.errors import AuthorizationFailure, NotFound

logger = logging.getLogger(__name__)

ResourceArg = Union[ResourceRef, OwnedResource]

FORBIDDEN_MESSAGE = "You do not have permission to access this resource"
OWN_RESOURCE_MESSAGE = "You cannot perform this action on your own job posting"


class OwnershipGuard:
    """Resolves whether a caller controls a specific resource.

    All lookups go through the OwnershipResolver port, so the id-based
    and the pre-joined call paths reach the same conclusion.
    """

    def __init__(self, resolver: OwnershipResolver) -> None:
        self._resolver = resolver

    async def require_ownership(
        self, caller: AuthenticatedCaller, resource: ResourceArg
    ) -> AuthenticatedCaller:
        """Require the caller to own the resource, or to be an admin.

        A missing resource and a resource owned by someone else produce
        the same AuthorizationFailure so that callers cannot discover the
        existence of other companies' resources.

        Raises:
            AuthorizationFailure: If the caller does not control the resource.
        """
        if caller.role is Role.ADMIN:
            return caller

        company_id = await self._owning_company(resource)
        if company_id is None:
            logger.info(
                "Ownership check on missing %s %s by user=%s",
                resource.kind.value,
                resource.id,
                caller.id,
            )
            raise AuthorizationFailure(
                FORBIDDEN_MESSAGE,
                resource=resource.kind.value,
                detail="resource not found",
            )

        caller_company_id = await self._resolver.company_owned_by(caller.id)
        if caller_company_id is None or caller_company_id != company_id:
            logger.info(
                "Ownership denied on %s %s for user=%s",
                resource.kind.value,
                resource.id,
                caller.id,
            )
            raise AuthorizationFailure(
                FORBIDDEN_MESSAGE,
                resource=resource.kind.value,
                detail="not owner",
            )
        return caller

    async def require_non_ownership(
        self, caller: AuthenticatedCaller, resource: ResourceArg
    ) -> AuthenticatedCaller:
        """Require the caller NOT to own the resource. Admins are exempt.

        Raises:
            NotFound: If the resource does not exist.
            AuthorizationFailure: If the caller's company owns the resource.
        """
        if caller.role is Role.ADMIN:
            return caller

        company_id = await self._owning_company(resource)
        if company_id is None:
            raise NotFound(resource.kind.value, resource.id)

        caller_company_id = await self._resolver.company_owned_by(caller.id)
        if caller_company_id is not None and caller_company_id == company_id:
            raise AuthorizationFailure(
                OWN_RESOURCE_MESSAGE,
                resource=resource.kind.value,
                detail="caller owns resource",
            )
        return caller

    async def _owning_company(self, resource: ResourceArg) -> Optional[str]:
        if isinstance(resource, OwnedResource):
            return resource.company_id
        return await self._resolver.resolve_owning_company(resource)


def has_ownership(
    caller: Optional[AuthenticatedCaller],
    resource_company_id: Optional[str],
    caller_company_id: Optional[str],
) -> bool:
    """Non-authoritative boolean helper for display logic.

    Mirrors the decision of OwnershipGuard.require_ownership for data the
    caller already holds. Never use it to authorize a write.
    """
    if caller is None or resource_company_id is None:
        return False
    if caller.role is Role.ADMIN:
        return True
    return caller_company_id is not None and caller_company_id == resource_company_id
