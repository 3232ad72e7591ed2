"""
Use case: Create a USER or EMPLOYER account.

Input: SignUpCommand (email, password, role)
Output: User
Side effects: Persists the user with a hashed password.
Failure cases: ValidationFailure, DuplicateEmailError.
"""

import logging
import re

from app.application.identity.dtos import SignUpCommand
from app.domain.access.entities import Role
from app.domain.access.ports import PasswordHasher
from app.domain.errors import ValidationFailure
from app.domain.hiring.entities import User
from app.domain.hiring.errors import DuplicateEmailError
from app.domain.hiring.ports import UserRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD_LENGTH = 8
SELF_SERVICE_ROLES = (Role.USER, Role.EMPLOYER)


class SignUpUseCase:
    """Registers a new account.

    Emails are normalized (trimmed, lower-cased) before the uniqueness
    check so that "A@x.io" and "a@x.io" collide.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher) -> None:
        self._users = users
        self._hasher = hasher

    async def execute(self, command: SignUpCommand) -> User:
        """Run the sign-up use case.

        Raises:
            ValidationFailure: On a malformed email, short password or
                non self-service role.
            DuplicateEmailError: If the email is already registered.
        """
        email = command.email.strip().lower()
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationFailure("Invalid email format", field="email")
        if len(command.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailure(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )
        if command.role not in SELF_SERVICE_ROLES:
            raise ValidationFailure("Invalid role", field="role")

        if await self._users.get_by_email(email) is not None:
            raise DuplicateEmailError()

        user = await self._users.add(
            User(
                email=email,
                password_hash=self._hasher.hash(command.password),
                role=command.role,
            )
        )
        logger.info("Account created: user=%s role=%s", user.id, user.role.value)
        return user
