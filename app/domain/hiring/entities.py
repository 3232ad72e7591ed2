"""
Domain entities for the hiring bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional
from uuid import uuid4

from app.domain.access.entities import AuthenticatedCaller, Role


def _new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobType(Enum):
    """Employment type of a job posting."""

    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


class JobStatus(Enum):
    """Publication status of a job posting."""

    DRAFT = "DRAFT"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ApplicationStatus(Enum):
    """Recruiting pipeline stage of an application.

    REJECTED and HIRED are terminal.
    """

    APPLIED = "APPLIED"
    REVIEWING = "REVIEWING"
    SHORTLISTED = "SHORTLISTED"
    REJECTED = "REJECTED"
    HIRED = "HIRED"


@dataclass
class User:
    """A platform account."""

    email: str
    password_hash: str
    role: Role = Role.USER
    is_active: bool = True
    email_verified: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_caller(self) -> AuthenticatedCaller:
        """Project the account onto the per-request caller shape."""
        return AuthenticatedCaller(
            id=self.id,
            email=self.email,
            role=self.role,
            is_active=self.is_active,
            email_verified=self.email_verified,
        )


@dataclass
class Company:
    """A company profile. Each user owns at most one company."""

    name: str
    owner_id: str
    location: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Job:
    """A job posting. Its owner is always reached through its company."""

    company_id: str
    title: str
    description: str
    location: str
    job_type: JobType
    status: JobStatus = JobStatus.DRAFT
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    experience: Optional[int] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class Application:
    """A user's application to a job. Unique per (job_id, user_id)."""

    job_id: str
    user_id: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    cover_note: Optional[str] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class ApplicationStats:
    """Application counts of one job, one company or the whole board.

    ``by_status`` always lists every status, zero counts included, in
    pipeline order.
    """

    by_status: dict[ApplicationStatus, int]
    last_applied_at: Optional[datetime] = None

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[ApplicationStatus, int],
        last_applied_at: Optional[datetime] = None,
    ) -> "ApplicationStats":
        return cls(
            by_status={status: counts.get(status, 0) for status in ApplicationStatus},
            last_applied_at=last_applied_at,
        )

    @property
    def total(self) -> int:
        return sum(self.by_status.values())


@dataclass(frozen=True)
class RecentApplication:
    """An application with the title of the job it targets."""

    application_id: str
    job_id: str
    job_title: str
    status: ApplicationStatus
    created_at: datetime


@dataclass(frozen=True)
class EmployerOverview:
    """Dashboard totals for an employer's company, or for every company."""

    total_jobs: int
    open_jobs: int
    applications: ApplicationStats
    recent_applications: list[RecentApplication]


@dataclass(frozen=True)
class Session:
    """A login session identified by an opaque token."""

    token: str
    user_id: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once the session lifetime has elapsed."""
        return (now or utcnow()) >= self.expires_at


@dataclass(frozen=True)
class Page:
    """One page of a paginated listing."""

    items: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class JobSearchCriteria:
    """Filters, ordering and paging for job listings."""

    query: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
    status: Optional[JobStatus] = JobStatus.OPEN
    company_id: Optional[str] = None
    sort: str = "newest"
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class UserListCriteria:
    """Filters and paging for the admin user listing."""

    role: Optional[Role] = None
    is_active: Optional[bool] = None
    page: int = 1
    limit: int = 20
