"""
Dependency injection for the job board.

Builds the Container (repositories, resolvers, guards, rate limiter)
once per application and provides FastAPI dependency functions that
wire it into use cases via constructor injection.
This is the composition root of the application.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from app.application.admin.force_close_job import ForceCloseJobUseCase
from app.application.admin.list_users import ListUsersUseCase
from app.application.admin.update_user_status import UpdateUserStatusUseCase
from app.application.hiring.apply_to_job import ApplyToJobUseCase
from app.application.hiring.create_company import CreateCompanyUseCase
from app.application.hiring.create_job import CreateJobUseCase
from app.application.hiring.delete_job import DeleteJobUseCase
from app.application.hiring.get_application import GetApplicationUseCase
from app.application.hiring.get_employer_overview import GetEmployerOverviewUseCase
from app.application.hiring.get_job import GetJobUseCase
from app.application.hiring.get_job_stats import GetJobStatsUseCase
from app.application.hiring.list_company_jobs import ListCompanyJobsUseCase
from app.application.hiring.list_job_applications import ListJobApplicationsUseCase
from app.application.hiring.list_my_applications import ListMyApplicationsUseCase
from app.application.hiring.search_jobs import SearchJobsUseCase
from app.application.hiring.update_application_status import (
    UpdateApplicationStatusUseCase,
)
from app.application.hiring.update_job import UpdateJobUseCase
from app.application.identity.log_in import LoginUseCase
from app.application.identity.log_out import LogoutUseCase
from app.application.identity.sign_up import SignUpUseCase
from app.core.config import Settings
from app.domain.access.ownership import OwnershipGuard
from app.domain.access.ports import OwnershipResolver, PasswordHasher, SessionResolver
from app.domain.hiring.ports import (
    ApplicationRepository,
    CompanyRepository,
    JobRepository,
    SessionRepository,
    UserRepository,
)
from app.infrastructure.access.resolvers import (
    RepositoryOwnershipResolver,
    RepositorySessionResolver,
)
from app.infrastructure.hiring.memory_repositories import (
    InMemoryApplicationRepository,
    InMemoryCompanyRepository,
    InMemoryJobRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
    MemoryDatabase,
)
from app.infrastructure.hiring.sql_repositories import (
    SqlApplicationRepository,
    SqlCompanyRepository,
    SqlJobRepository,
    SqlSessionRepository,
    SqlUserRepository,
)
from app.infrastructure.identity.password_hasher import PasslibPasswordHasher
from app.shared.security.rate_limiting import RateLimiter

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Long-lived collaborators shared by every request."""

    settings: Settings
    rate_limiter: RateLimiter
    users: UserRepository
    sessions: SessionRepository
    companies: CompanyRepository
    jobs: JobRepository
    applications: ApplicationRepository
    hasher: PasswordHasher
    ownership_resolver: OwnershipResolver
    session_resolver: SessionResolver
    ownership_guard: OwnershipGuard
    engine: Optional[AsyncEngine] = None

    async def close(self) -> None:
        """Release pooled database connections, if any."""
        if self.engine is not None:
            await self.engine.dispose()


def build_container(
    config: Settings,
    rate_limiter: Optional[RateLimiter] = None,
    hasher: Optional[PasswordHasher] = None,
) -> Container:
    """Build the container from settings.

    Without a database URL every repository is in-memory and shares one
    MemoryDatabase; otherwise the SQL adapters share one AsyncEngine.
    """
    engine: Optional[AsyncEngine] = None
    dsn = config.get_async_database_url()
    if dsn:
        engine = create_async_engine(dsn, pool_pre_ping=True)
        users = SqlUserRepository(engine)
        sessions = SqlSessionRepository(engine)
        companies = SqlCompanyRepository(engine)
        jobs = SqlJobRepository(engine)
        applications = SqlApplicationRepository(engine)
        logger.info("Using PostgreSQL repositories")
    else:
        db = MemoryDatabase()
        users = InMemoryUserRepository(db)
        sessions = InMemorySessionRepository(db)
        companies = InMemoryCompanyRepository(db)
        jobs = InMemoryJobRepository(db)
        applications = InMemoryApplicationRepository(db)
        logger.info("No database configured, using in-memory repositories")

    ownership_resolver = RepositoryOwnershipResolver(jobs, applications, companies)
    return Container(
        settings=config,
        rate_limiter=rate_limiter or RateLimiter.from_settings(config),
        users=users,
        sessions=sessions,
        companies=companies,
        jobs=jobs,
        applications=applications,
        hasher=hasher or PasslibPasswordHasher(),
        ownership_resolver=ownership_resolver,
        session_resolver=RepositorySessionResolver(sessions, users),
        ownership_guard=OwnershipGuard(ownership_resolver),
        engine=engine,
    )


def get_container(request: Request) -> Container:
    """Return the container attached to the running application."""
    return request.app.state.container


def get_sign_up_use_case(container: Container = Depends(get_container)) -> SignUpUseCase:
    """Build SignUpUseCase with its infrastructure dependencies."""
    return SignUpUseCase(users=container.users, hasher=container.hasher)


def get_login_use_case(container: Container = Depends(get_container)) -> LoginUseCase:
    """Build LoginUseCase with its infrastructure dependencies."""
    return LoginUseCase(
        users=container.users,
        sessions=container.sessions,
        hasher=container.hasher,
        session_duration=timedelta(days=container.settings.session_duration_days),
    )


def get_logout_use_case(container: Container = Depends(get_container)) -> LogoutUseCase:
    return LogoutUseCase(sessions=container.sessions)


def get_create_company_use_case(
    container: Container = Depends(get_container),
) -> CreateCompanyUseCase:
    return CreateCompanyUseCase(companies=container.companies)


def get_create_job_use_case(container: Container = Depends(get_container)) -> CreateJobUseCase:
    return CreateJobUseCase(companies=container.companies, jobs=container.jobs)


def get_update_job_use_case(container: Container = Depends(get_container)) -> UpdateJobUseCase:
    return UpdateJobUseCase(jobs=container.jobs)


def get_delete_job_use_case(container: Container = Depends(get_container)) -> DeleteJobUseCase:
    return DeleteJobUseCase(jobs=container.jobs)


def get_search_jobs_use_case(
    container: Container = Depends(get_container),
) -> SearchJobsUseCase:
    return SearchJobsUseCase(jobs=container.jobs)


def get_get_job_use_case(container: Container = Depends(get_container)) -> GetJobUseCase:
    return GetJobUseCase(jobs=container.jobs)


def get_list_company_jobs_use_case(
    container: Container = Depends(get_container),
) -> ListCompanyJobsUseCase:
    return ListCompanyJobsUseCase(companies=container.companies, jobs=container.jobs)


def get_job_stats_use_case(container: Container = Depends(get_container)) -> GetJobStatsUseCase:
    return GetJobStatsUseCase(jobs=container.jobs, applications=container.applications)


def get_employer_overview_use_case(
    container: Container = Depends(get_container),
) -> GetEmployerOverviewUseCase:
    return GetEmployerOverviewUseCase(
        companies=container.companies,
        jobs=container.jobs,
        applications=container.applications,
    )


def get_apply_to_job_use_case(
    container: Container = Depends(get_container),
) -> ApplyToJobUseCase:
    return ApplyToJobUseCase(jobs=container.jobs, applications=container.applications)


def get_list_job_applications_use_case(
    container: Container = Depends(get_container),
) -> ListJobApplicationsUseCase:
    return ListJobApplicationsUseCase(
        jobs=container.jobs, applications=container.applications
    )


def get_list_my_applications_use_case(
    container: Container = Depends(get_container),
) -> ListMyApplicationsUseCase:
    return ListMyApplicationsUseCase(applications=container.applications)


def get_get_application_use_case(
    container: Container = Depends(get_container),
) -> GetApplicationUseCase:
    return GetApplicationUseCase(
        applications=container.applications, ownership=container.ownership_guard
    )


def get_update_application_status_use_case(
    container: Container = Depends(get_container),
) -> UpdateApplicationStatusUseCase:
    return UpdateApplicationStatusUseCase(applications=container.applications)


def get_list_users_use_case(container: Container = Depends(get_container)) -> ListUsersUseCase:
    return ListUsersUseCase(users=container.users)


def get_update_user_status_use_case(
    container: Container = Depends(get_container),
) -> UpdateUserStatusUseCase:
    return UpdateUserStatusUseCase(users=container.users, sessions=container.sessions)


def get_force_close_job_use_case(
    container: Container = Depends(get_container),
) -> ForceCloseJobUseCase:
    return ForceCloseJobUseCase(jobs=container.jobs)
