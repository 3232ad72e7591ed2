"""
Port interfaces (ABCs) for the hiring bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

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
)


class UserRepository(ABC):
    """Port for persisting and retrieving user accounts."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[User]:
        """Return a user by id, or None."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by (case-insensitive) email, or None."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persist a new user.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_users(self, criteria: UserListCriteria) -> Page:
        """Return a page of users, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        """Enable or disable an account. Returns None if the user is missing."""
        raise NotImplementedError


class SessionRepository(ABC):
    """Port for login sessions."""

    @abstractmethod
    async def add(self, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_for_user(self, user_id: str) -> int:
        """Delete every session of a user. Returns the number removed."""
        raise NotImplementedError


class CompanyRepository(ABC):
    """Port for company profiles."""

    @abstractmethod
    async def get(self, company_id: str) -> Optional[Company]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_owner(self, owner_id: str) -> Optional[Company]:
        """Return the company owned by the user, or None."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, company: Company) -> Company:
        """Persist a new company.

        Raises:
            DuplicateCompanyError: If the owner already has a company.
        """
        raise NotImplementedError


class JobRepository(ABC):
    """Port for job postings."""

    @abstractmethod
    async def get(self, job_id: str) -> Optional[Job]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, job: Job) -> Job:
        raise NotImplementedError

    @abstractmethod
    async def update(self, job: Job) -> Job:
        """Overwrite the stored job with the given state."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, job_id: str) -> bool:
        """Delete a job and, by cascade, its applications.

        Returns:
            True if a job was deleted.
        """
        raise NotImplementedError

    @abstractmethod
    async def search(self, criteria: JobSearchCriteria) -> Page:
        """Return a page of jobs matching the criteria."""
        raise NotImplementedError

    @abstractmethod
    async def count(
        self, company_id: Optional[str] = None, status: Optional[JobStatus] = None
    ) -> int:
        """Count jobs, optionally of one company and one status."""
        raise NotImplementedError


class ApplicationRepository(ABC):
    """Port for job applications."""

    @abstractmethod
    async def get(self, application_id: str) -> Optional[Application]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, application: Application) -> Application:
        """Persist a new application.

        Raises:
            DuplicateApplicationError: If the user already applied to the job.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_for_job(self, job_id: str) -> list[Application]:
        """Return applications to a job, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Application]:
        """Return applications submitted by a user, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus,
    ) -> Optional[Application]:
        """Atomically move an application from ``expected`` to ``new``.

        Returns:
            The updated application, or None when the application is
            missing or its stored status is no longer ``expected``.
        """
        raise NotImplementedError

    @abstractmethod
    async def stats_for_job(self, job_id: str) -> ApplicationStats:
        """Count a job's applications by status and date the latest one."""
        raise NotImplementedError

    @abstractmethod
    async def stats_for_company(self, company_id: Optional[str]) -> ApplicationStats:
        """Same as stats_for_job over every job of a company.

        Args:
            company_id: Owning company, or None for every company.
        """
        raise NotImplementedError

    @abstractmethod
    async def recent_for_company(
        self, company_id: Optional[str], limit: int
    ) -> list[RecentApplication]:
        """Return the newest applications to a company's jobs (all if None)."""
        raise NotImplementedError
