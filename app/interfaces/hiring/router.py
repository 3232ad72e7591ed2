"""
FastAPI router for companies, jobs and applications.

All routes delegate to use cases. No business logic here.
Every guarded route declares a GuardPipeline; public reads are limited
by the slowapi default limit instead.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.application.hiring.apply_to_job import ApplyToJobUseCase
from app.application.hiring.create_company import CreateCompanyUseCase
from app.application.hiring.create_job import CreateJobUseCase
from app.application.hiring.delete_job import DeleteJobUseCase
from app.application.hiring.dtos import (
    ApplyToJobCommand,
    CreateCompanyCommand,
    CreateJobCommand,
    UpdateApplicationStatusCommand,
    UpdateJobCommand,
)
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
from app.core.config import settings
from app.domain.access.entities import ResourceKind, Role
from app.domain.hiring.entities import Application, JobSearchCriteria, Page
from app.interfaces.dependencies import (
    get_apply_to_job_use_case,
    get_create_company_use_case,
    get_create_job_use_case,
    get_delete_job_use_case,
    get_employer_overview_use_case,
    get_get_application_use_case,
    get_get_job_use_case,
    get_job_stats_use_case,
    get_list_company_jobs_use_case,
    get_list_job_applications_use_case,
    get_list_my_applications_use_case,
    get_search_jobs_use_case,
    get_update_application_status_use_case,
    get_update_job_use_case,
)
from app.interfaces.hiring.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdateRequest,
    ApplyRequest,
    CompanyCreateRequest,
    CompanyResponse,
    EmployerOverviewResponse,
    JobCreateRequest,
    JobPageResponse,
    JobResponse,
    JobStatsResponse,
    JobUpdateRequest,
)
from app.interfaces.pipeline import GuardContext, GuardPipeline, path_resource
from app.interfaces.schemas import ERROR_RESPONSES, PaginationResponse
from app.shared.security.rate_limiting import LimitClass, limiter
from app.shared.validation import (
    JobSearchParams,
    Pagination,
    validate_job_search_params,
    validate_page_params,
)

router = APIRouter(tags=["hiring"])

JOB_IN_PATH = path_resource(ResourceKind.JOB, "job_id")
APPLICATION_IN_PATH = path_resource(ResourceKind.APPLICATION, "application_id")

# ------------------------------------------------------------------
# Guards
# ------------------------------------------------------------------

search_guard = GuardPipeline().query(validate_job_search_params)
public_read_guard = GuardPipeline()
create_company_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.JOB_CREATION)
    .body(CompanyCreateRequest)
    .require_role(Role.EMPLOYER)
)
create_job_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.JOB_CREATION)
    .body(JobCreateRequest)
    .require_role(Role.EMPLOYER)
)
update_job_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.JOB_CREATION)
    .body(JobUpdateRequest)
    .require_role(Role.EMPLOYER)
    .require_ownership(JOB_IN_PATH)
)
delete_job_guard = GuardPipeline().require_role(Role.EMPLOYER).require_ownership(JOB_IN_PATH)
company_jobs_guard = GuardPipeline().query(validate_page_params).require_role(Role.EMPLOYER)
employer_overview_guard = GuardPipeline().require_role(Role.EMPLOYER)
job_stats_guard = GuardPipeline().require_role(Role.EMPLOYER).require_ownership(JOB_IN_PATH)
apply_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.APPLICATION)
    .body(ApplyRequest)
    .require_role(Role.USER)
    .require_non_ownership(JOB_IN_PATH)
)
job_applications_guard = (
    GuardPipeline().require_role(Role.EMPLOYER).require_ownership(JOB_IN_PATH)
)
applicant_guard = GuardPipeline().authenticated()
update_application_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.APPLICATION)
    .body(ApplicationStatusUpdateRequest)
    .require_role(Role.EMPLOYER)
    .require_ownership(APPLICATION_IN_PATH)
)


def _job_page(page: Page) -> JobPageResponse:
    return JobPageResponse(
        jobs=[JobResponse.model_validate(job) for job in page.items],
        pagination=PaginationResponse.from_page(page),
    )


def _application_list(applications: list[Application]) -> ApplicationListResponse:
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        count=len(applications),
    )


# ------------------------------------------------------------------
# Companies
# ------------------------------------------------------------------


@router.post(
    "/companies",
    status_code=201,
    response_model=CompanyResponse,
    responses=ERROR_RESPONSES,
    summary="Create the caller's company",
)
async def create_company(
    context: GuardContext = Depends(create_company_guard),
    use_case: CreateCompanyUseCase = Depends(get_create_company_use_case),
) -> CompanyResponse:
    """Create the single company profile an employer owns."""
    body: CompanyCreateRequest = context.body
    company = await use_case.execute(
        CreateCompanyCommand(
            owner=context.require_caller(),
            name=body.name,
            location=body.location,
            website=body.website,
        )
    )
    return CompanyResponse.model_validate(company)


# ------------------------------------------------------------------
# Jobs
# ------------------------------------------------------------------


@router.get(
    "/jobs",
    response_model=JobPageResponse,
    responses=ERROR_RESPONSES,
    summary="Search open jobs",
)
@limiter.limit(settings.rate_limit_default)
async def search_jobs(
    request: Request,
    use_case: SearchJobsUseCase = Depends(get_search_jobs_use_case),
) -> JobPageResponse:
    """Public job search with filters, sorting and pagination."""
    context = await search_guard(request)
    params: JobSearchParams = context.query
    page = await use_case.execute(
        JobSearchCriteria(
            query=params.query,
            location=params.location,
            job_type=params.job_type,
            min_salary=params.min_salary,
            max_salary=params.max_salary,
            sort=params.sort,
            page=params.page,
            limit=params.limit,
        )
    )
    return _job_page(page)


@router.get(
    "/jobs/{job_id}",
    response_model=JobResponse,
    responses=ERROR_RESPONSES,
    summary="Read an open job",
)
@limiter.limit(settings.rate_limit_default)
async def get_job(
    request: Request,
    job_id: str,
    use_case: GetJobUseCase = Depends(get_get_job_use_case),
) -> JobResponse:
    """Public job detail. Drafts and closed jobs are not found."""
    await public_read_guard(request)
    return JobResponse.model_validate(await use_case.execute(job_id))


@router.post(
    "/jobs",
    status_code=201,
    response_model=JobResponse,
    responses=ERROR_RESPONSES,
    summary="Post a job",
)
async def create_job(
    context: GuardContext = Depends(create_job_guard),
    use_case: CreateJobUseCase = Depends(get_create_job_use_case),
) -> JobResponse:
    """Create a job under the caller's company."""
    body: JobCreateRequest = context.body
    job = await use_case.execute(
        CreateJobCommand(
            employer=context.require_caller(),
            title=body.title,
            description=body.description,
            location=body.location,
            job_type=body.job_type,
            status=body.status,
            salary_min=body.salary_min,
            salary_max=body.salary_max,
            experience=body.experience,
        )
    )
    return JobResponse.model_validate(job)


@router.patch(
    "/jobs/{job_id}",
    response_model=JobResponse,
    responses=ERROR_RESPONSES,
    summary="Update a job",
)
async def update_job(
    job_id: str,
    context: GuardContext = Depends(update_job_guard),
    use_case: UpdateJobUseCase = Depends(get_update_job_use_case),
) -> JobResponse:
    """Apply a partial update to a job the caller owns."""
    body: JobUpdateRequest = context.body
    job = await use_case.execute(UpdateJobCommand(job_id=job_id, changes=body.changes()))
    return JobResponse.model_validate(job)


@router.delete(
    "/jobs/{job_id}",
    status_code=204,
    response_class=Response,
    responses=ERROR_RESPONSES,
    summary="Delete a job",
)
async def delete_job(
    job_id: str,
    context: GuardContext = Depends(delete_job_guard),
    use_case: DeleteJobUseCase = Depends(get_delete_job_use_case),
) -> Response:
    """Delete a job the caller owns, together with its applications."""
    await use_case.execute(job_id)
    return Response(status_code=204)


@router.get(
    "/employer/jobs",
    response_model=JobPageResponse,
    responses=ERROR_RESPONSES,
    summary="List the caller's company jobs",
)
async def list_company_jobs(
    context: GuardContext = Depends(company_jobs_guard),
    use_case: ListCompanyJobsUseCase = Depends(get_list_company_jobs_use_case),
) -> JobPageResponse:
    """Employer dashboard listing, every status included."""
    paging: Pagination = context.query
    page = await use_case.execute(context.require_caller(), paging.page, paging.limit)
    return _job_page(page)


@router.get(
    "/employer/jobs/{job_id}/stats",
    response_model=JobStatsResponse,
    responses=ERROR_RESPONSES,
    summary="Application statistics of a job",
)
async def get_job_stats(
    job_id: str,
    context: GuardContext = Depends(job_stats_guard),
    use_case: GetJobStatsUseCase = Depends(get_job_stats_use_case),
) -> JobStatsResponse:
    """Application counts by status for a job the caller owns."""
    return JobStatsResponse.from_stats(await use_case.execute(job_id))


@router.get(
    "/employer/overview",
    response_model=EmployerOverviewResponse,
    responses=ERROR_RESPONSES,
    summary="Employer dashboard overview",
)
async def get_employer_overview(
    context: GuardContext = Depends(employer_overview_guard),
    use_case: GetEmployerOverviewUseCase = Depends(get_employer_overview_use_case),
) -> EmployerOverviewResponse:
    """Job and application totals for the caller's company."""
    overview = await use_case.execute(context.require_caller())
    return EmployerOverviewResponse.from_overview(overview)


# ------------------------------------------------------------------
# Applications
# ------------------------------------------------------------------


@router.post(
    "/jobs/{job_id}/applications",
    status_code=201,
    response_model=ApplicationResponse,
    responses=ERROR_RESPONSES,
    summary="Apply to a job",
)
async def apply_to_job(
    job_id: str,
    context: GuardContext = Depends(apply_guard),
    use_case: ApplyToJobUseCase = Depends(get_apply_to_job_use_case),
) -> ApplicationResponse:
    """Submit an application. Applying to one's own posting is forbidden."""
    body: ApplyRequest = context.body
    application = await use_case.execute(
        ApplyToJobCommand(
            applicant=context.require_caller(), job_id=job_id, cover_note=body.cover_note
        )
    )
    return ApplicationResponse.model_validate(application)


@router.get(
    "/jobs/{job_id}/applications",
    response_model=ApplicationListResponse,
    responses=ERROR_RESPONSES,
    summary="List applications to a job",
)
async def list_job_applications(
    job_id: str,
    context: GuardContext = Depends(job_applications_guard),
    use_case: ListJobApplicationsUseCase = Depends(get_list_job_applications_use_case),
) -> ApplicationListResponse:
    """Applications received by a job the caller owns."""
    return _application_list(await use_case.execute(job_id))


@router.get(
    "/applications",
    response_model=ApplicationListResponse,
    responses=ERROR_RESPONSES,
    summary="List my applications",
)
async def list_my_applications(
    context: GuardContext = Depends(applicant_guard),
    use_case: ListMyApplicationsUseCase = Depends(get_list_my_applications_use_case),
) -> ApplicationListResponse:
    """Applications submitted by the caller."""
    return _application_list(await use_case.execute(context.require_caller()))


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses=ERROR_RESPONSES,
    summary="Read an application",
)
async def get_application(
    application_id: str,
    context: GuardContext = Depends(applicant_guard),
    use_case: GetApplicationUseCase = Depends(get_get_application_use_case),
) -> ApplicationResponse:
    """Readable by the applicant, the owning employer and admins."""
    application = await use_case.execute(context.require_caller(), application_id)
    return ApplicationResponse.model_validate(application)


@router.patch(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses=ERROR_RESPONSES,
    summary="Change an application's status",
)
async def update_application_status(
    application_id: str,
    context: GuardContext = Depends(update_application_guard),
    use_case: UpdateApplicationStatusUseCase = Depends(get_update_application_status_use_case),
) -> ApplicationResponse:
    """Move an application along the recruiting pipeline."""
    body: ApplicationStatusUpdateRequest = context.body
    application = await use_case.execute(
        UpdateApplicationStatusCommand(
            actor=context.require_caller(),
            application_id=application_id,
            status=body.status,
        )
    )
    return ApplicationResponse.model_validate(application)
