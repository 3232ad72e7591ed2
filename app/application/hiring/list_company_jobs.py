"""
Use case: List every job of the employer's own company.

Input: employer, page, limit
Output: Page of Job (all statuses, newest first)
Failure cases: CompanyRequiredError.
"""

from app.domain.access.entities import AuthenticatedCaller
from app.domain.hiring.entities import JobSearchCriteria, Page
from app.domain.hiring.errors import CompanyRequiredError
from app.domain.hiring.ports import CompanyRepository, JobRepository


class ListCompanyJobsUseCase:
    """Employer dashboard listing, drafts and closed jobs included."""

    def __init__(self, companies: CompanyRepository, jobs: JobRepository) -> None:
        self._companies = companies
        self._jobs = jobs

    async def execute(self, employer: AuthenticatedCaller, page: int, limit: int) -> Page:
        company = await self._companies.get_by_owner(employer.id)
        if company is None:
            raise CompanyRequiredError()
        return await self._jobs.search(
            JobSearchCriteria(status=None, company_id=company.id, page=page, limit=limit)
        )
