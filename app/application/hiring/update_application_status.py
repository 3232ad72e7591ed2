"""
Use case: Move an application through the recruiting pipeline.

Input: UpdateApplicationStatusCommand (actor, application_id, status)
Output: Application
Side effects: Persists the new status with a compare-and-swap.
Failure cases: NotFound, StatusUnchangedError,
    InvalidStatusTransitionError, StaleStatusError.
"""

import logging

from app.application.hiring.dtos import UpdateApplicationStatusCommand
from app.domain.errors import NotFound
from app.domain.hiring.entities import Application
from app.domain.hiring.errors import StaleStatusError
from app.domain.hiring.ports import ApplicationRepository
from app.domain.hiring.status_machine import apply_transition

logger = logging.getLogger(__name__)


class UpdateApplicationStatusUseCase:
    """Validates a transition against the state machine, then writes it.

    The write only succeeds if the stored status is still the one the
    transition was validated against. A concurrent change in between
    surfaces as StaleStatusError instead of silently overwriting it.
    """

    def __init__(self, applications: ApplicationRepository) -> None:
        self._applications = applications

    async def execute(self, command: UpdateApplicationStatusCommand) -> Application:
        """Run the status update use case.

        Raises:
            NotFound: If the application does not exist.
            StatusUnchangedError: If the status is already the requested one.
            InvalidStatusTransitionError: If the transition is not allowed.
            StaleStatusError: If another request changed the status first.
        """
        application = await self._applications.get(command.application_id)
        if application is None:
            raise NotFound("application", command.application_id)

        current = application.status
        new_status = apply_transition(current, command.status)

        updated = await self._applications.compare_and_set_status(
            application.id, current, new_status
        )
        if updated is None:
            raise StaleStatusError(application.id, current)

        logger.info(
            "Application %s moved %s -> %s by user=%s",
            application.id,
            current.value,
            new_status.value,
            command.actor.id,
        )
        return updated
