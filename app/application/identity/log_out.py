"""
Use case: Close the current session.

Input: session token
Output: None
Side effects: Deletes the session. Unknown tokens are ignored.
"""

from typing import Optional

from app.domain.hiring.ports import SessionRepository


class LogoutUseCase:
    def __init__(self, sessions: SessionRepository) -> None:
        self._sessions = sessions

    async def execute(self, token: Optional[str]) -> None:
        if token:
            await self._sessions.delete(token)
