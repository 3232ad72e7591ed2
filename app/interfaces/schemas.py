"""
Pydantic schemas shared by every router.

Request and response bodies use camelCase on the wire; Python code
keeps snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.domain.hiring.entities import Page


class RequestModel(BaseModel):
    """Base for request bodies: camelCase keys, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class ResponseModel(BaseModel):
    """Base for response bodies built from domain entities."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: ErrorBody


class MessageResponse(ResponseModel):
    message: str


class PaginationResponse(ResponseModel):
    """Paging metadata of a listing."""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationResponse":
        return cls(
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
        )


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    storage: str


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
}
