"""
Pydantic schemas for the admin console endpoints.
"""

from pydantic import StrictBool

from app.interfaces.identity.schemas import UserResponse
from app.interfaces.schemas import PaginationResponse, RequestModel, ResponseModel


class UserStatusUpdateRequest(RequestModel):
    """Enable or disable an account. Only JSON booleans are accepted."""

    is_active: StrictBool


class UserPageResponse(ResponseModel):
    users: list[UserResponse]
    pagination: PaginationResponse
