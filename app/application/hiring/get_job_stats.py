"""
Use case: Application statistics of one job.

Input: job id (ownership already checked)
Output: ApplicationStats (every status counted, latest application date)
Failure cases: NotFound.
"""

from app.domain.errors import NotFound
from app.domain.hiring.entities import ApplicationStats
from app.domain.hiring.ports import ApplicationRepository, JobRepository


class GetJobStatsUseCase:
    def __init__(self, jobs: JobRepository, applications: ApplicationRepository) -> None:
        self._jobs = jobs
        self._applications = applications

    async def execute(self, job_id: str) -> ApplicationStats:
        # Admins skip the ownership lookup, so a missing job surfaces here.
        if await self._jobs.get(job_id) is None:
            raise NotFound("job", job_id)
        return await self._applications.stats_for_job(job_id)
