"""
Use case: Delete a job posting and, by cascade, its applications.

Input: job id
Output: None
Failure cases: NotFound.
"""

import logging

from app.domain.errors import NotFound
from app.domain.hiring.ports import JobRepository

logger = logging.getLogger(__name__)


class DeleteJobUseCase:
    def __init__(self, jobs: JobRepository) -> None:
        self._jobs = jobs

    async def execute(self, job_id: str) -> None:
        if not await self._jobs.delete(job_id):
            raise NotFound("job", job_id)
        logger.info("Job %s deleted", job_id)
