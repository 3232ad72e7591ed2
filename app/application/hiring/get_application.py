"""
Use case: Read one application.

Input: caller, application id
Output: Application
Failure cases: AuthorizationFailure, NotFound (admins only).
"""

from app.domain.access.entities import AuthenticatedCaller, ResourceKind, ResourceRef
from app.domain.access.ownership import OwnershipGuard
from app.domain.errors import NotFound
from app.domain.hiring.entities import Application
from app.domain.hiring.ports import ApplicationRepository


class GetApplicationUseCase:
    """The applicant, the employer owning the job, or an admin may read it.

    Anyone else gets the same AuthorizationFailure whether or not the
    application exists.
    """

    def __init__(
        self, applications: ApplicationRepository, ownership: OwnershipGuard
    ) -> None:
        self._applications = applications
        self._ownership = ownership

    async def execute(self, caller: AuthenticatedCaller, application_id: str) -> Application:
        """Run the read use case.

        Raises:
            AuthorizationFailure: If the caller is neither applicant, job
                owner nor admin, or the application is missing for a
                non-admin.
            NotFound: If an admin asks for a missing application.
        """
        application = await self._applications.get(application_id)
        if application is not None and application.user_id == caller.id:
            return application

        await self._ownership.require_ownership(
            caller, ResourceRef(ResourceKind.APPLICATION, application_id)
        )
        if application is None:
            raise NotFound("application", application_id)
        return application
