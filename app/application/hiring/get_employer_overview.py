"""
Use case: Employer dashboard overview.

Input: employer (or admin)
Output: EmployerOverview for the caller's company; admins get totals
    across every company.
Failure cases: CompanyRequiredError for an employer without a company.
"""

import logging
from typing import Optional

from app.domain.access.entities import AuthenticatedCaller, Role
from app.domain.hiring.entities import EmployerOverview, JobStatus
from app.domain.hiring.errors import CompanyRequiredError
from app.domain.hiring.ports import ApplicationRepository, CompanyRepository, JobRepository

logger = logging.getLogger(__name__)

RECENT_APPLICATIONS = 5


class GetEmployerOverviewUseCase:
    """Aggregates jobs and applications for the employer dashboard."""

    def __init__(
        self,
        companies: CompanyRepository,
        jobs: JobRepository,
        applications: ApplicationRepository,
    ) -> None:
        self._companies = companies
        self._jobs = jobs
        self._applications = applications

    async def execute(self, caller: AuthenticatedCaller) -> EmployerOverview:
        """Build the overview.

        Args:
            caller: EMPLOYER or ADMIN; the role check already ran.

        Returns:
            Job counts, application counts by status and the five most
            recent applications.

        Raises:
            CompanyRequiredError: If a non-admin caller owns no company.
        """
        company_id: Optional[str] = None
        if caller.role is not Role.ADMIN:
            company = await self._companies.get_by_owner(caller.id)
            if company is None:
                raise CompanyRequiredError()
            company_id = company.id

        overview = EmployerOverview(
            total_jobs=await self._jobs.count(company_id),
            open_jobs=await self._jobs.count(company_id, JobStatus.OPEN),
            applications=await self._applications.stats_for_company(company_id),
            recent_applications=await self._applications.recent_for_company(
                company_id, RECENT_APPLICATIONS
            ),
        )
        logger.debug(
            "Overview for %s: %d jobs, %d applications",
            company_id or "all companies",
            overview.total_jobs,
            overview.applications.total,
        )
        return overview
