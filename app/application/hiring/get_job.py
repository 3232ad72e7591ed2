"""
Use case: Read a publicly listed job.

Input: job id
Output: Job
Failure cases: NotFound (missing, draft or closed jobs).
"""

from app.domain.errors import NotFound
from app.domain.hiring.entities import Job, JobStatus
from app.domain.hiring.ports import JobRepository


class GetJobUseCase:
    """Only OPEN jobs are visible on the public detail page."""

    def __init__(self, jobs: JobRepository) -> None:
        self._jobs = jobs

    async def execute(self, job_id: str) -> Job:
        job = await self._jobs.get(job_id)
        if job is None or job.status is not JobStatus.OPEN:
            raise NotFound("job", job_id)
        return job
