"""
Adapter: in-memory repositories.

Implements the hiring ports over plain dictionaries. Used when no
database is configured (development, tests). Every write goes through
one asyncio.Lock so uniqueness checks and compare-and-swap status
updates are atomic with respect to other coroutines.

Stored entities are copied on the way in and out, so callers never
mutate shared state behind the lock's back.
"""

import asyncio
import copy
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, TypeVar

from app.domain.hiring.entities import (
    Application,
    ApplicationStats,
    ApplicationStatus,
    Company,
    Job,
    JobSearchCriteria,
    JobStatus,
    Page,
    RecentApplication,
    Session,
    User,
    UserListCriteria,
    utcnow,
)
from app.domain.hiring.errors import (
    DuplicateApplicationError,
    DuplicateCompanyError,
    DuplicateEmailError,
)
from app.domain.hiring.ports import (
    ApplicationRepository,
    CompanyRepository,
    JobRepository,
    SessionRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MemoryDatabase:
    """Tables shared by the in-memory repositories."""

    users: dict[str, User] = field(default_factory=dict)
    sessions: dict[str, Session] = field(default_factory=dict)
    companies: dict[str, Company] = field(default_factory=dict)
    jobs: dict[str, Job] = field(default_factory=dict)
    applications: dict[str, Application] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def _copy(entity: Optional[T]) -> Optional[T]:
    return copy.copy(entity) if entity is not None else None


def _paginate(rows: list, page: int, limit: int) -> Page:
    start = (page - 1) * limit
    items = [copy.copy(row) for row in rows[start:start + limit]]
    return Page(items=items, total=len(rows), page=page, limit=limit)


def _newest_first(rows: list, created_at: Callable[[object], datetime]) -> list:
    # Reverse first so that ties keep the most recently inserted row on top.
    return sorted(reversed(rows), key=created_at, reverse=True)


class InMemoryUserRepository(UserRepository):
    """Users keyed by id, with case-insensitive unique emails."""

    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get(self, user_id: str) -> Optional[User]:
        return _copy(self._db.users.get(user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        for user in self._db.users.values():
            if user.email.lower() == wanted:
                return _copy(user)
        return None

    async def add(self, user: User) -> User:
        async with self._db.lock:
            wanted = user.email.lower()
            if any(u.email.lower() == wanted for u in self._db.users.values()):
                raise DuplicateEmailError()
            self._db.users[user.id] = copy.copy(user)
        return _copy(user)

    async def list_users(self, criteria: UserListCriteria) -> Page:
        rows = [
            u
            for u in self._db.users.values()
            if (criteria.role is None or u.role is criteria.role)
            and (criteria.is_active is None or u.is_active == criteria.is_active)
        ]
        return _paginate(
            _newest_first(rows, lambda u: u.created_at), criteria.page, criteria.limit
        )

    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        async with self._db.lock:
            user = self._db.users.get(user_id)
            if user is None:
                return None
            user.is_active = is_active
            return _copy(user)


class InMemorySessionRepository(SessionRepository):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def add(self, session: Session) -> None:
        async with self._db.lock:
            self._db.sessions[session.token] = session

    async def get(self, token: str) -> Optional[Session]:
        return self._db.sessions.get(token)

    async def delete(self, token: str) -> None:
        async with self._db.lock:
            self._db.sessions.pop(token, None)

    async def delete_for_user(self, user_id: str) -> int:
        async with self._db.lock:
            tokens = [t for t, s in self._db.sessions.items() if s.user_id == user_id]
            for token in tokens:
                del self._db.sessions[token]
        return len(tokens)


class InMemoryCompanyRepository(CompanyRepository):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get(self, company_id: str) -> Optional[Company]:
        return _copy(self._db.companies.get(company_id))

    async def get_by_owner(self, owner_id: str) -> Optional[Company]:
        for company in self._db.companies.values():
            if company.owner_id == owner_id:
                return _copy(company)
        return None

    async def add(self, company: Company) -> Company:
        async with self._db.lock:
            if any(c.owner_id == company.owner_id for c in self._db.companies.values()):
                raise DuplicateCompanyError(company.owner_id)
            self._db.companies[company.id] = copy.copy(company)
        return _copy(company)


def _job_matches(job: Job, criteria: JobSearchCriteria) -> bool:
    if criteria.status is not None and job.status is not criteria.status:
        return False
    if criteria.company_id is not None and job.company_id != criteria.company_id:
        return False
    if criteria.query:
        needle = criteria.query.lower()
        if needle not in job.title.lower() and needle not in job.description.lower():
            return False
    if criteria.location and criteria.location.lower() not in job.location.lower():
        return False
    if criteria.job_type is not None and job.job_type is not criteria.job_type:
        return False
    # Salary ranges overlap; a missing bound is open-ended.
    if criteria.min_salary is not None and job.salary_max is not None:
        if job.salary_max < criteria.min_salary:
            return False
    if criteria.max_salary is not None and job.salary_min is not None:
        if job.salary_min > criteria.max_salary:
            return False
    return True


def _sort_jobs(rows: list[Job], sort: str) -> list[Job]:
    ordered = _newest_first(rows, lambda j: j.created_at)
    if sort == "salary_high":
        ordered.sort(key=lambda j: -(j.salary_min if j.salary_min is not None else -1))
        ordered.sort(key=lambda j: -(j.salary_max if j.salary_max is not None else -1))
    elif sort == "salary_low":
        ordered.sort(key=lambda j: (j.salary_max is None, j.salary_max or 0))
        ordered.sort(key=lambda j: (j.salary_min is None, j.salary_min or 0))
    return ordered


class InMemoryJobRepository(JobRepository):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get(self, job_id: str) -> Optional[Job]:
        return _copy(self._db.jobs.get(job_id))

    async def add(self, job: Job) -> Job:
        async with self._db.lock:
            self._db.jobs[job.id] = copy.copy(job)
        return _copy(job)

    async def update(self, job: Job) -> Job:
        async with self._db.lock:
            job.updated_at = utcnow()
            self._db.jobs[job.id] = copy.copy(job)
        return _copy(job)

    async def delete(self, job_id: str) -> bool:
        async with self._db.lock:
            if self._db.jobs.pop(job_id, None) is None:
                return False
            orphaned = [a for a, app in self._db.applications.items() if app.job_id == job_id]
            for application_id in orphaned:
                del self._db.applications[application_id]
        logger.debug("Deleted job %s and %d applications", job_id, len(orphaned))
        return True

    async def search(self, criteria: JobSearchCriteria) -> Page:
        rows = [j for j in self._db.jobs.values() if _job_matches(j, criteria)]
        return _paginate(_sort_jobs(rows, criteria.sort), criteria.page, criteria.limit)

    async def count(
        self, company_id: Optional[str] = None, status: Optional[JobStatus] = None
    ) -> int:
        return sum(
            1
            for job in self._db.jobs.values()
            if (company_id is None or job.company_id == company_id)
            and (status is None or job.status is status)
        )


class InMemoryApplicationRepository(ApplicationRepository):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get(self, application_id: str) -> Optional[Application]:
        return _copy(self._db.applications.get(application_id))

    async def add(self, application: Application) -> Application:
        async with self._db.lock:
            for existing in self._db.applications.values():
                if existing.job_id == application.job_id and existing.user_id == application.user_id:
                    raise DuplicateApplicationError(application.job_id)
            self._db.applications[application.id] = copy.copy(application)
        return _copy(application)

    async def list_for_job(self, job_id: str) -> list[Application]:
        rows = [a for a in self._db.applications.values() if a.job_id == job_id]
        return [copy.copy(a) for a in _newest_first(rows, lambda a: a.created_at)]

    async def list_for_user(self, user_id: str) -> list[Application]:
        rows = [a for a in self._db.applications.values() if a.user_id == user_id]
        return [copy.copy(a) for a in _newest_first(rows, lambda a: a.created_at)]

    async def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus,
    ) -> Optional[Application]:
        async with self._db.lock:
            application = self._db.applications.get(application_id)
            if application is None or application.status is not expected:
                return None
            application.status = new
            application.updated_at = utcnow()
            return _copy(application)

    async def stats_for_job(self, job_id: str) -> ApplicationStats:
        return _stats([a for a in self._db.applications.values() if a.job_id == job_id])

    async def stats_for_company(self, company_id: Optional[str]) -> ApplicationStats:
        return _stats(self._of_company(company_id))

    async def recent_for_company(
        self, company_id: Optional[str], limit: int
    ) -> list[RecentApplication]:
        rows = _newest_first(self._of_company(company_id), lambda a: a.created_at)[:limit]
        return [
            RecentApplication(
                application_id=a.id,
                job_id=a.job_id,
                job_title=self._db.jobs[a.job_id].title,
                status=a.status,
                created_at=a.created_at,
            )
            for a in rows
        ]

    def _of_company(self, company_id: Optional[str]) -> list[Application]:
        return [
            a
            for a in self._db.applications.values()
            if a.job_id in self._db.jobs
            and (company_id is None or self._db.jobs[a.job_id].company_id == company_id)
        ]


def _stats(rows: list[Application]) -> ApplicationStats:
    return ApplicationStats.from_counts(
        Counter(a.status for a in rows),
        last_applied_at=max((a.created_at for a in rows), default=None),
    )
