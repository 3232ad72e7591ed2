"""
Use case: Page through accounts for the admin console.

Input: UserListCriteria (role, is_active, page, limit)
Output: Page of User
"""

from app.domain.hiring.entities import Page, UserListCriteria
from app.domain.hiring.ports import UserRepository


class ListUsersUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def execute(self, criteria: UserListCriteria) -> Page:
        return await self._users.list_users(criteria)
