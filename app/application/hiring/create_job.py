"""
Use case: Post a job under the employer's company.

Input: CreateJobCommand
Output: Job
Side effects: Persists the job (DRAFT unless another status is given).
Failure cases: CompanyRequiredError, ValidationFailure.
"""

import logging

from app.application.hiring.dtos import CreateJobCommand
from app.application.hiring.salary import check_salary_range
from app.domain.hiring.entities import Job
from app.domain.hiring.errors import CompanyRequiredError
from app.domain.hiring.ports import CompanyRepository, JobRepository

logger = logging.getLogger(__name__)


class CreateJobUseCase:
    """Creates a job owned by the caller's company.

    Ownership is implicit: the company is looked up from the caller, so
    a job can never be attached to someone else's company.
    """

    def __init__(self, companies: CompanyRepository, jobs: JobRepository) -> None:
        self._companies = companies
        self._jobs = jobs

    async def execute(self, command: CreateJobCommand) -> Job:
        """Run the create-job use case.

        Raises:
            CompanyRequiredError: If the employer has no company profile.
            ValidationFailure: If the salary range is inverted.
        """
        company = await self._companies.get_by_owner(command.employer.id)
        if company is None:
            raise CompanyRequiredError()
        check_salary_range(command.salary_min, command.salary_max)

        job = await self._jobs.add(
            Job(
                company_id=company.id,
                title=command.title.strip(),
                description=command.description.strip(),
                location=command.location.strip(),
                job_type=command.job_type,
                status=command.status,
                salary_min=command.salary_min,
                salary_max=command.salary_max,
                experience=command.experience,
            )
        )
        logger.info(
            "Job %s created for company=%s status=%s", job.id, company.id, job.status.value
        )
        return job
