"""
Use case: Open a session for an email/password pair.

Input: LoginCommand (email, password)
Output: LoginResult (user, session)
Side effects: Persists a new session.
Failure cases: InvalidCredentialsError, AccountDisabledError.
"""

import logging
import secrets
from datetime import timedelta

from app.application.identity.dtos import LoginCommand, LoginResult
from app.domain.access.errors import AccountDisabledError, InvalidCredentialsError
from app.domain.access.ports import PasswordHasher
from app.domain.hiring.entities import Session, utcnow
from app.domain.hiring.ports import SessionRepository, UserRepository

logger = logging.getLogger(__name__)

SESSION_TOKEN_BYTES = 32


class LoginUseCase:
    """Verifies credentials and issues an opaque session token.

    The password is verified before the account state is looked at, so
    the "deactivated" answer is only given to someone who knows the
    password.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        hasher: PasswordHasher,
        session_duration: timedelta = timedelta(days=7),
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._hasher = hasher
        self._session_duration = session_duration

    async def execute(self, command: LoginCommand) -> LoginResult:
        """Run the login use case.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
            AccountDisabledError: If the account was disabled by an admin.
        """
        user = await self._users.get_by_email(command.email.strip().lower())
        if user is None or not self._hasher.verify(command.password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError(user.id)

        session = Session(
            token=secrets.token_hex(SESSION_TOKEN_BYTES),
            user_id=user.id,
            expires_at=utcnow() + self._session_duration,
        )
        await self._sessions.add(session)
        logger.info("Session opened for user=%s", user.id)
        return LoginResult(user=user, session=session)
