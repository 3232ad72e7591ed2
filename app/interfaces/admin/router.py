"""
FastAPI router for the admin console.

All routes delegate to use cases. No business logic here.
Every route requires the ADMIN role; state-changing routes are also
counted against the admin rate-limit budget and written to the audit log.
"""

from fastapi import APIRouter, Depends

from app.application.admin.dtos import ForceCloseJobCommand, UpdateUserStatusCommand
from app.application.admin.force_close_job import ForceCloseJobUseCase
from app.application.admin.list_users import ListUsersUseCase
from app.application.admin.update_user_status import UpdateUserStatusUseCase
from app.domain.access.entities import Role
from app.domain.hiring.entities import UserListCriteria
from app.interfaces.admin.schemas import UserPageResponse, UserStatusUpdateRequest
from app.interfaces.dependencies import (
    get_force_close_job_use_case,
    get_list_users_use_case,
    get_update_user_status_use_case,
)
from app.interfaces.hiring.schemas import JobResponse
from app.interfaces.identity.schemas import UserResponse
from app.interfaces.pipeline import GuardContext, GuardPipeline
from app.interfaces.schemas import ERROR_RESPONSES, PaginationResponse
from app.shared.logging import log_admin_action
from app.shared.security.rate_limiting import LimitClass
from app.shared.validation import validate_user_list_params

router = APIRouter(prefix="/admin", tags=["admin"])

list_users_guard = GuardPipeline().query(validate_user_list_params).require_role(Role.ADMIN)
update_user_guard = (
    GuardPipeline()
    .rate_limit(LimitClass.ADMIN)
    .body(UserStatusUpdateRequest)
    .require_role(Role.ADMIN)
)
close_job_guard = GuardPipeline().rate_limit(LimitClass.ADMIN).require_role(Role.ADMIN)


@router.get(
    "/users",
    response_model=UserPageResponse,
    responses=ERROR_RESPONSES,
    summary="List accounts",
)
async def list_users(
    context: GuardContext = Depends(list_users_guard),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
) -> UserPageResponse:
    """Page through accounts, optionally filtered by role and status."""
    criteria: UserListCriteria = context.query
    page = await use_case.execute(criteria)
    return UserPageResponse(
        users=[UserResponse.model_validate(user) for user in page.items],
        pagination=PaginationResponse.from_page(page),
    )


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    responses=ERROR_RESPONSES,
    summary="Enable or disable an account",
)
async def update_user_status(
    user_id: str,
    context: GuardContext = Depends(update_user_guard),
    use_case: UpdateUserStatusUseCase = Depends(get_update_user_status_use_case),
) -> UserResponse:
    body: UserStatusUpdateRequest = context.body
    admin = context.require_caller()
    user = await use_case.execute(
        UpdateUserStatusCommand(admin=admin, user_id=user_id, is_active=body.is_active)
    )
    log_admin_action(
        context.request_id,
        "user.status",
        admin.id,
        user_id,
        {"isActive": body.is_active},
    )
    return UserResponse.model_validate(user)


@router.patch(
    "/jobs/{job_id}/close",
    response_model=JobResponse,
    responses=ERROR_RESPONSES,
    summary="Force-close a job",
)
async def force_close_job(
    job_id: str,
    context: GuardContext = Depends(close_job_guard),
    use_case: ForceCloseJobUseCase = Depends(get_force_close_job_use_case),
) -> JobResponse:
    """Close any job, whoever owns it."""
    admin = context.require_caller()
    job = await use_case.execute(ForceCloseJobCommand(admin=admin, job_id=job_id))
    log_admin_action(context.request_id, "job.close", admin.id, job_id)
    return JobResponse.model_validate(job)
