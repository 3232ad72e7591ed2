"""
Use case: Enable or disable an account.

Input: UpdateUserStatusCommand (admin, user_id, is_active)
Output: User
Side effects: Disabling deletes every session of the user.
Failure cases: NotFound, ValidationFailure.
"""

import logging

from app.application.admin.dtos import UpdateUserStatusCommand
from app.domain.errors import NotFound, ValidationFailure
from app.domain.hiring.entities import User
from app.domain.hiring.ports import SessionRepository, UserRepository

logger = logging.getLogger(__name__)


class UpdateUserStatusUseCase:
    """Toggles ``is_active``.

    A disabled account stops resolving immediately: its sessions are
    deleted, and the session resolver also rejects inactive users.
    """

    def __init__(self, users: UserRepository, sessions: SessionRepository) -> None:
        self._users = users
        self._sessions = sessions

    async def execute(self, command: UpdateUserStatusCommand) -> User:
        """Run the update-user-status use case.

        Raises:
            ValidationFailure: If an admin tries to disable their own account.
            NotFound: If the user does not exist.
        """
        if command.user_id == command.admin.id and not command.is_active:
            raise ValidationFailure("You cannot disable your own account", field="isActive")

        user = await self._users.set_active(command.user_id, command.is_active)
        if user is None:
            raise NotFound("user", command.user_id)

        if not command.is_active:
            removed = await self._sessions.delete_for_user(user.id)
            logger.info("Disabled user=%s, %d sessions removed", user.id, removed)
        return user
