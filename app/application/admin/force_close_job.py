"""
Use case: Close any job regardless of ownership.

Input: ForceCloseJobCommand (admin, job_id)
Output: Job (status CLOSED)
Failure cases: NotFound.
"""

import logging

from app.application.admin.dtos import ForceCloseJobCommand
from app.domain.errors import NotFound
from app.domain.hiring.entities import Job, JobStatus
from app.domain.hiring.ports import JobRepository

logger = logging.getLogger(__name__)


class ForceCloseJobUseCase:
    def __init__(self, jobs: JobRepository) -> None:
        self._jobs = jobs

    async def execute(self, command: ForceCloseJobCommand) -> Job:
        job = await self._jobs.get(command.job_id)
        if job is None:
            raise NotFound("job", command.job_id)

        job.status = JobStatus.CLOSED
        closed = await self._jobs.update(job)
        logger.info("Job %s force-closed by admin=%s", job.id, command.admin.id)
        return closed
