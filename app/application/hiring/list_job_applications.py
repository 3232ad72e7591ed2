"""
Use case: List the applications received by a job.

Input: job id (ownership already checked)
Output: list of Application, newest first
Failure cases: NotFound.
"""

from app.domain.errors import NotFound
from app.domain.hiring.entities import Application
from app.domain.hiring.ports import ApplicationRepository, JobRepository


class ListJobApplicationsUseCase:
    def __init__(self, jobs: JobRepository, applications: ApplicationRepository) -> None:
        self._jobs = jobs
        self._applications = applications

    async def execute(self, job_id: str) -> list[Application]:
        if await self._jobs.get(job_id) is None:
            raise NotFound("job", job_id)
        return await self._applications.list_for_job(job_id)
