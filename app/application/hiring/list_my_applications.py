"""
Use case: List the caller's own applications.

Input: AuthenticatedCaller
Output: list of Application, newest first
"""

from app.domain.access.entities import AuthenticatedCaller
from app.domain.hiring.entities import Application
from app.domain.hiring.ports import ApplicationRepository


class ListMyApplicationsUseCase:
    def __init__(self, applications: ApplicationRepository) -> None:
        self._applications = applications

    async def execute(self, caller: AuthenticatedCaller) -> list[Application]:
        return await self._applications.list_for_user(caller.id)
