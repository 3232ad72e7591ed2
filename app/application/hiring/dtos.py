"""
Data Transfer Objects for the hiring application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from app.domain.access.entities import AuthenticatedCaller
from app.domain.hiring.entities import ApplicationStatus, JobStatus, JobType


@dataclass(frozen=True)
class CreateCompanyCommand:
    """Input DTO for creating the caller's company profile."""

    owner: AuthenticatedCaller
    name: str
    location: Optional[str] = None
    website: Optional[str] = None


@dataclass(frozen=True)
class CreateJobCommand:
    """Input DTO for posting a job under the caller's company.

    Attributes:
        employer: The posting employer. Must own a company.
        status: Initial status; jobs start as DRAFT unless told otherwise.
    """

    employer: AuthenticatedCaller
    title: str
    description: str
    location: str
    job_type: JobType
    status: JobStatus = JobStatus.DRAFT
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    experience: Optional[int] = None


@dataclass(frozen=True)
class UpdateJobCommand:
    """Input DTO for a partial job update.

    Attributes:
        job_id: Job to update. Ownership was checked by the caller.
        changes: Only the fields the client sent, by entity attribute name.
            An explicit None clears an optional field.
    """

    job_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApplyToJobCommand:
    """Input DTO for submitting an application."""

    applicant: AuthenticatedCaller
    job_id: str
    cover_note: Optional[str] = None


@dataclass(frozen=True)
class UpdateApplicationStatusCommand:
    """Input DTO for moving an application through the pipeline.

    Attributes:
        actor: Employer (or admin) performing the change.
        application_id: Application to update.
        status: Requested target status.
    """

    actor: AuthenticatedCaller
    application_id: str
    status: ApplicationStatus
