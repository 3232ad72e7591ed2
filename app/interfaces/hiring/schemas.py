"""
Pydantic schemas for company, job and application endpoints.

These schemas enforce input validation and define the API contract.
All fields use strict typing with constraints.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.domain.hiring.entities import (
    ApplicationStats,
    ApplicationStatus,
    EmployerOverview,
    JobStatus,
    JobType,
)
from app.interfaces.schemas import PaginationResponse, RequestModel, ResponseModel

TITLE_MIN_LEN = 3
TITLE_MAX_LEN = 200
DESCRIPTION_MIN_LEN = 50
DESCRIPTION_MAX_LEN = 10_000
LOCATION_MAX_LEN = 200
COVER_NOTE_MAX_LEN = 5000
MAX_SALARY = 10_000_000
MAX_EXPERIENCE_YEARS = 50


# ------------------------------------------------------------------
# Companies
# ------------------------------------------------------------------


class CompanyCreateRequest(RequestModel):
    """Request schema for creating the caller's company."""

    name: str = Field(..., min_length=2, max_length=200)
    location: Optional[str] = Field(default=None, max_length=LOCATION_MAX_LEN)
    website: Optional[str] = Field(default=None, max_length=500)


class CompanyResponse(ResponseModel):
    id: str
    name: str
    owner_id: str
    location: Optional[str]
    website: Optional[str]
    is_verified: bool
    created_at: datetime


# ------------------------------------------------------------------
# Jobs
# ------------------------------------------------------------------


class JobCreateRequest(RequestModel):
    """Request schema for posting a job.

    Attributes:
        title: 3-200 characters.
        description: 50-10000 characters.
        location: 1-200 characters.
        job_type: FULL_TIME, PART_TIME, CONTRACT or INTERNSHIP.
        status: Initial status, DRAFT by default.
        salary_min / salary_max: Optional bounds, 0-10,000,000.
        experience: Required years of experience, 0-50.
    """

    title: str = Field(..., min_length=TITLE_MIN_LEN, max_length=TITLE_MAX_LEN)
    description: str = Field(
        ..., min_length=DESCRIPTION_MIN_LEN, max_length=DESCRIPTION_MAX_LEN
    )
    location: str = Field(..., min_length=1, max_length=LOCATION_MAX_LEN)
    job_type: JobType
    status: JobStatus = JobStatus.DRAFT
    salary_min: Optional[int] = Field(default=None, ge=0, le=MAX_SALARY)
    salary_max: Optional[int] = Field(default=None, ge=0, le=MAX_SALARY)
    experience: Optional[int] = Field(default=None, ge=0, le=MAX_EXPERIENCE_YEARS)


class JobUpdateRequest(RequestModel):
    """Partial update. Only the keys present in the body are applied.

    Optional attributes (salaries, experience) may be cleared with null;
    the others may not.
    """

    title: Optional[str] = Field(default=None, min_length=TITLE_MIN_LEN, max_length=TITLE_MAX_LEN)
    description: Optional[str] = Field(
        default=None, min_length=DESCRIPTION_MIN_LEN, max_length=DESCRIPTION_MAX_LEN
    )
    location: Optional[str] = Field(default=None, min_length=1, max_length=LOCATION_MAX_LEN)
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    salary_min: Optional[int] = Field(default=None, ge=0, le=MAX_SALARY)
    salary_max: Optional[int] = Field(default=None, ge=0, le=MAX_SALARY)
    experience: Optional[int] = Field(default=None, ge=0, le=MAX_EXPERIENCE_YEARS)

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "JobUpdateRequest":
        for name in ("title", "description", "location", "job_type", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """The fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class JobResponse(ResponseModel):
    id: str
    company_id: str
    title: str
    description: str
    location: str
    job_type: JobType
    status: JobStatus
    salary_min: Optional[int]
    salary_max: Optional[int]
    experience: Optional[int]
    created_at: datetime
    updated_at: datetime


class JobPageResponse(ResponseModel):
    """One page of jobs with its paging metadata."""

    jobs: list[JobResponse]
    pagination: PaginationResponse


# ------------------------------------------------------------------
# Applications
# ------------------------------------------------------------------


class ApplyRequest(RequestModel):
    """Request schema for applying to a job."""

    cover_note: Optional[str] = Field(default=None, min_length=1, max_length=COVER_NOTE_MAX_LEN)


class ApplicationStatusUpdateRequest(RequestModel):
    status: ApplicationStatus


class ApplicationResponse(ResponseModel):
    id: str
    job_id: str
    user_id: str
    status: ApplicationStatus
    cover_note: Optional[str]
    created_at: datetime
    updated_at: datetime


class ApplicationListResponse(ResponseModel):
    applications: list[ApplicationResponse]
    count: int


class StatusCountResponse(ResponseModel):
    status: ApplicationStatus
    count: int


def _status_counts(stats: ApplicationStats) -> list[StatusCountResponse]:
    return [StatusCountResponse(status=s, count=n) for s, n in stats.by_status.items()]


class JobStatsResponse(ResponseModel):
    """Application statistics of one job."""

    total_applications: int
    applications_by_status: list[StatusCountResponse]
    last_application_at: Optional[datetime]

    @classmethod
    def from_stats(cls, stats: ApplicationStats) -> "JobStatsResponse":
        return cls(
            total_applications=stats.total,
            applications_by_status=_status_counts(stats),
            last_application_at=stats.last_applied_at,
        )


class RecentApplicationResponse(ResponseModel):
    application_id: str
    job_id: str
    job_title: str
    status: ApplicationStatus
    created_at: datetime


class EmployerOverviewResponse(ResponseModel):
    """Employer dashboard totals."""

    total_jobs: int
    open_jobs: int
    total_applications: int
    applications_by_status: list[StatusCountResponse]
    recent_applications: list[RecentApplicationResponse]

    @classmethod
    def from_overview(cls, overview: EmployerOverview) -> "EmployerOverviewResponse":
        return cls(
            total_jobs=overview.total_jobs,
            open_jobs=overview.open_jobs,
            total_applications=overview.applications.total,
            applications_by_status=_status_counts(overview.applications),
            recent_applications=[
                RecentApplicationResponse.model_validate(r)
                for r in overview.recent_applications
            ],
        )
