"""
Domain-specific errors for the hiring bounded context.

Each error is a variant of the shared taxonomy in app.domain.errors and
is mapped to an HTTP response by its kind, never by its message.
No framework imports allowed.
"""

from app.domain.errors import Conflict, ValidationFailure
from app.domain.hiring.entities import ApplicationStatus


class StatusUnchangedError(ValidationFailure):
    """Raised when the requested status equals the current status."""

    def __init__(self, status: ApplicationStatus) -> None:
        super().__init__(
            f"Application status is already set to {status.value}",
            field="status",
        )
        self.status = status


class InvalidStatusTransitionError(ValidationFailure):
    """Raised when a status change is not in the transition table."""

    def __init__(
        self,
        current: ApplicationStatus,
        requested: ApplicationStatus,
        allowed: tuple[ApplicationStatus, ...],
    ) -> None:
        allowed_text = ", ".join(s.value for s in allowed) or "none (terminal state)"
        super().__init__(
            f"Invalid status transition from {current.value} to {requested.value}. "
            f"Allowed transitions: {allowed_text}",
            field="status",
        )
        self.current = current
        self.requested = requested
        self.allowed = allowed


class StaleStatusError(Conflict):
    """Raised when another request changed the status first."""

    def __init__(self, application_id: str, expected: ApplicationStatus) -> None:
        super().__init__(
            "Application status was changed by another request. Reload and retry.",
            code="STATUS_CONFLICT",
            resource="application",
            detail=f"{application_id} no longer {expected.value}",
        )
        self.application_id = application_id
        self.expected = expected


class DuplicateApplicationError(Conflict):
    """Raised when a user applies twice to the same job."""

    def __init__(self, job_id: str) -> None:
        super().__init__(
            "You have already applied to this job",
            code="DUPLICATE_APPLICATION",
            resource="application",
            detail=job_id,
        )
        self.job_id = job_id


class DuplicateEmailError(Conflict):
    """Raised when signing up with an email that is already registered."""

    def __init__(self) -> None:
        super().__init__(
            "An account with this email already exists",
            code="DUPLICATE_EMAIL",
            resource="user",
        )


class DuplicateCompanyError(Conflict):
    """Raised when a user who already owns a company creates another."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(
            "You already have a company profile",
            code="DUPLICATE_COMPANY",
            resource="company",
            detail=owner_id,
        )


class JobNotOpenError(ValidationFailure):
    """Raised when applying to a job that is not accepting applications."""

    def __init__(self, job_id: str) -> None:
        super().__init__(
            "This job is not currently accepting applications",
            field="job",
            detail=job_id,
        )
        self.job_id = job_id


class CompanyRequiredError(ValidationFailure):
    """Raised when an employer without a company posts a job."""

    def __init__(self) -> None:
        super().__init__(
            "Company profile not found. Please create a company profile first.",
            field="company",
        )
