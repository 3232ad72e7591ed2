"""
Use case: Partially update a job posting.

Input: UpdateJobCommand (job_id, changes)
Output: Job
Side effects: Persists the job.
Failure cases: NotFound, ValidationFailure.
"""

import logging

from app.application.hiring.dtos import UpdateJobCommand
from app.application.hiring.salary import check_salary_range
from app.domain.errors import NotFound, ValidationFailure
from app.domain.hiring.entities import Job
from app.domain.hiring.ports import JobRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "title",
    "description",
    "location",
    "job_type",
    "status",
    "salary_min",
    "salary_max",
    "experience",
)
TRIMMED_FIELDS = ("title", "description", "location")


class UpdateJobUseCase:
    """Applies the fields the client sent; absent fields are untouched.

    The salary range is re-checked against the merged result, so
    sending only ``salary_min`` cannot invert a stored range.
    """

    def __init__(self, jobs: JobRepository) -> None:
        self._jobs = jobs

    async def execute(self, command: UpdateJobCommand) -> Job:
        """Run the update-job use case.

        Raises:
            NotFound: If the job does not exist.
            ValidationFailure: On an unknown field or an inverted salary range.
        """
        job = await self._jobs.get(command.job_id)
        if job is None:
            raise NotFound("job", command.job_id)

        for name, value in command.changes.items():
            if name not in UPDATABLE_FIELDS:
                raise ValidationFailure(f"Field {name} cannot be updated", field=name)
            if name in TRIMMED_FIELDS and isinstance(value, str):
                value = value.strip()
            setattr(job, name, value)
        check_salary_range(job.salary_min, job.salary_max)

        updated = await self._jobs.update(job)
        logger.info("Job %s updated: %s", job.id, ", ".join(sorted(command.changes)) or "-")
        return updated
