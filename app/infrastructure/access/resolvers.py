"""
Adapters: ownership and session resolution.

Both resolvers are built on top of the hiring repository ports, so
they work unchanged over the in-memory and the SQL backends.
"""

import logging
from typing import Optional

from app.domain.access.entities import AuthenticatedCaller, ResourceKind, ResourceRef
from app.domain.access.ports import OwnershipResolver, SessionResolver
from app.domain.hiring.ports import (
    ApplicationRepository,
    CompanyRepository,
    JobRepository,
    SessionRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class RepositoryOwnershipResolver(OwnershipResolver):
    """Resolves owning companies by walking application -> job -> company."""

    def __init__(
        self,
        jobs: JobRepository,
        applications: ApplicationRepository,
        companies: CompanyRepository,
    ) -> None:
        self._jobs = jobs
        self._applications = applications
        self._companies = companies

    async def resolve_owning_company(self, resource: ResourceRef) -> Optional[str]:
        job_id = resource.id
        if resource.kind is ResourceKind.APPLICATION:
            application = await self._applications.get(resource.id)
            if application is None:
                return None
            job_id = application.job_id

        job = await self._jobs.get(job_id)
        return job.company_id if job is not None else None

    async def company_owned_by(self, user_id: str) -> Optional[str]:
        company = await self._companies.get_by_owner(user_id)
        return company.id if company is not None else None


class RepositorySessionResolver(SessionResolver):
    """Resolves session tokens to the caller that owns them.

    Expired sessions are deleted on sight. Disabled accounts resolve to
    no caller even while their session row still exists.
    """

    def __init__(self, sessions: SessionRepository, users: UserRepository) -> None:
        self._sessions = sessions
        self._users = users

    async def resolve(self, token: Optional[str]) -> Optional[AuthenticatedCaller]:
        if not token:
            return None

        session = await self._sessions.get(token)
        if session is None:
            return None
        if session.is_expired():
            await self._sessions.delete(token)
            logger.info("Expired session removed for user=%s", session.user_id)
            return None

        user = await self._users.get(session.user_id)
        if user is None or not user.is_active:
            return None
        return user.to_caller()
