"""
Use case: Submit an application to an open job.

Input: ApplyToJobCommand (applicant, job_id, cover_note)
Output: Application (status APPLIED)
Side effects: Persists the application.
Failure cases: NotFound, JobNotOpenError, DuplicateApplicationError.
"""

import logging

from app.application.hiring.dtos import ApplyToJobCommand
from app.domain.errors import NotFound
from app.domain.hiring.entities import Application, JobStatus
from app.domain.hiring.errors import JobNotOpenError
from app.domain.hiring.ports import ApplicationRepository, JobRepository

logger = logging.getLogger(__name__)


class ApplyToJobUseCase:
    """Creates an APPLIED application.

    The caller has already passed the non-ownership guard, so employers
    cannot apply to their own postings. Uniqueness per (job, user) is
    enforced by the repository.
    """

    def __init__(self, jobs: JobRepository, applications: ApplicationRepository) -> None:
        self._jobs = jobs
        self._applications = applications

    async def execute(self, command: ApplyToJobCommand) -> Application:
        """Run the apply use case.

        Raises:
            NotFound: If the job does not exist.
            JobNotOpenError: If the job is DRAFT or CLOSED.
            DuplicateApplicationError: If the user already applied.
        """
        job = await self._jobs.get(command.job_id)
        if job is None:
            raise NotFound("job", command.job_id)
        if job.status is not JobStatus.OPEN:
            raise JobNotOpenError(job.id)

        cover_note = command.cover_note.strip() if command.cover_note else None
        application = await self._applications.add(
            Application(job_id=job.id, user_id=command.applicant.id, cover_note=cover_note)
        )
        logger.info(
            "Application %s submitted to job=%s by user=%s",
            application.id,
            job.id,
            command.applicant.id,
        )
        return application
