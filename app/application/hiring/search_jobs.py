"""
Use case: Search job postings.

Input: JobSearchCriteria
Output: Page of Job
Side effects: None.
"""

from app.domain.hiring.entities import JobSearchCriteria, Page
from app.domain.hiring.ports import JobRepository


class SearchJobsUseCase:
    """Returns one page of jobs matching the criteria.

    Public search passes the default criteria status (OPEN); the
    employer dashboard passes its own company and no status filter.
    """

    def __init__(self, jobs: JobRepository) -> None:
        self._jobs = jobs

    async def execute(self, criteria: JobSearchCriteria) -> Page:
        return await self._jobs.search(criteria)
