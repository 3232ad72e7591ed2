"""
Request validation utilities.

Defensive checks for incoming requests, run before any business logic:
- JSON body validation (content type, payload size, syntax, shape)
- Enum, pagination and boolean query parameters
- Overall query string length
- Public job search and admin user listing parameters

Every function returns a ValidationOutcome and never raises on
malformed input. Callers inspect ``outcome.valid``.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from app.domain.access.entities import Role
from app.domain.hiring.entities import JobType, UserListCriteria

T = TypeVar("T")
E = TypeVar("E", bound=Enum)
M = TypeVar("M", bound=BaseModel)

MAX_PAYLOAD_SIZE = 1024 * 1024  # 1 MB
MAX_QUERY_STRING_LENGTH = 2048
MAX_PAGE_LIMIT = 100
MAX_SEARCH_PAGE_LIMIT = 50
DEFAULT_PAGE_LIMIT = 20
MAX_SEARCH_TEXT_LENGTH = 200
MAX_SALARY = 10_000_000
SEARCH_SORT_OPTIONS = ("newest", "salary_high", "salary_low")
INTEGER_PATTERN = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Successful validation carrying the parsed value."""

    data: T
    valid: bool = True


@dataclass(frozen=True)
class Invalid:
    """Failed validation carrying a message naming the offending input."""

    error: str
    field: Optional[str] = None
    valid: bool = False


ValidationOutcome = Union[Valid[T], Invalid]


@dataclass(frozen=True)
class Pagination:
    """Validated page and limit."""

    page: int
    limit: int


@dataclass(frozen=True)
class JobSearchParams:
    """Validated public job search parameters."""

    page: int
    limit: int
    query: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
    sort: str = "newest"


def _too_large(max_size: int) -> Invalid:
    return Invalid(f"Payload too large. Maximum size is {max_size} bytes", field="body")


def validate_body_headers(
    content_type: Optional[str],
    content_length: Optional[str],
    max_size: int = MAX_PAYLOAD_SIZE,
) -> ValidationOutcome[None]:
    """Check the declared type and size of a JSON body.

    Needs only the headers, so callers run it before reading the body.
    """
    if not content_type or "application/json" not in content_type.lower():
        return Invalid("Content-Type must be application/json", field="content-type")
    if content_length:
        try:
            declared = int(content_length)
        except ValueError:
            return Invalid("Content-Length must be an integer", field="content-length")
        if declared > max_size:
            return _too_large(max_size)
    return Valid(None)


def validate_json_body(
    content_type: Optional[str],
    content_length: Optional[str],
    raw: bytes,
    max_size: int = MAX_PAYLOAD_SIZE,
) -> ValidationOutcome[Any]:
    """Validate and parse a JSON request body.

    The headers are checked first; the actual size is checked as well
    since the declared length may lie or be missing.
    """
    declared = validate_body_headers(content_type, content_length, max_size)
    if not declared.valid:
        return declared
    if len(raw) > max_size:
        return _too_large(max_size)

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return Invalid("Invalid JSON format", field="body")
    return Valid(data)


def validate_model(payload: Any, schema: type[M]) -> ValidationOutcome[M]:
    """Validate a parsed JSON payload against a pydantic schema.

    The failure message names the first offending field.
    """
    if not isinstance(payload, dict):
        return Invalid("Request body must be a JSON object", field="body")
    try:
        return Valid(schema.model_validate(payload))
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "body"
        return Invalid(f"{location}: {first.get('msg', 'invalid value')}", field=location)


def validate_enum(value: Optional[str], enum_cls: type[E], name: str = "value") -> ValidationOutcome[E]:
    """Return the enum member whose value equals ``value``."""
    allowed = [member.value for member in enum_cls]
    if not value:
        return Invalid(f"{name} is required", field=name)
    for member in enum_cls:
        if member.value == value:
            return Valid(member)
    return Invalid(
        f"Invalid {name}. Must be one of: {', '.join(str(v) for v in allowed)}",
        field=name,
    )


def _parse_int(value: str) -> Optional[int]:
    text = value.strip()
    if not INTEGER_PATTERN.fullmatch(text):
        return None
    return int(text)


def validate_pagination(
    page: Optional[str],
    limit: Optional[str],
    max_limit: int = MAX_PAGE_LIMIT,
    default_limit: int = DEFAULT_PAGE_LIMIT,
) -> ValidationOutcome[Pagination]:
    """Validate page >= 1 and 1 <= limit <= max_limit. Never clamps."""
    parsed_page = 1
    if page is not None:
        candidate = _parse_int(page)
        if candidate is None or candidate < 1:
            return Invalid("page must be a positive integer", field="page")
        parsed_page = candidate

    parsed_limit = default_limit
    if limit is not None:
        candidate = _parse_int(limit)
        if candidate is None or not 1 <= candidate <= max_limit:
            return Invalid(f"limit must be between 1 and {max_limit}", field="limit")
        parsed_limit = candidate

    return Valid(Pagination(page=parsed_page, limit=parsed_limit))


def validate_boolean(value: Optional[str], name: str = "value") -> ValidationOutcome[Optional[bool]]:
    """Accept only the literal strings "true" and "false".

    A missing parameter is valid and yields None.
    """
    if value is None:
        return Valid(None)
    if value == "true":
        return Valid(True)
    if value == "false":
        return Valid(False)
    return Invalid(f'{name} must be "true" or "false"', field=name)


def validate_query_string(
    query_string: str, max_length: int = MAX_QUERY_STRING_LENGTH
) -> ValidationOutcome[str]:
    """Reject pathological URLs regardless of individual parameters."""
    if len(query_string) > max_length:
        return Invalid(
            f"Query string too long. Maximum length is {max_length} characters",
            field="query",
        )
    return Valid(query_string)


def _validate_text(params: Mapping[str, str], name: str) -> ValidationOutcome[Optional[str]]:
    raw = params.get(name)
    if raw is None or not raw.strip():
        return Valid(None)
    trimmed = raw.strip()
    if len(trimmed) > MAX_SEARCH_TEXT_LENGTH:
        return Invalid(
            f"{name} must not exceed {MAX_SEARCH_TEXT_LENGTH} characters", field=name
        )
    return Valid(trimmed)


def _validate_salary(params: Mapping[str, str], name: str) -> ValidationOutcome[Optional[int]]:
    raw = params.get(name)
    if raw is None:
        return Valid(None)
    amount = _parse_int(raw)
    if amount is None or amount < 0:
        return Invalid(f"{name} must be a non-negative integer", field=name)
    if amount > MAX_SALARY:
        return Invalid(f"{name} exceeds maximum allowed value", field=name)
    return Valid(amount)


def validate_job_search_params(params: Mapping[str, str]) -> ValidationOutcome[JobSearchParams]:
    """Validate the query parameters of the public job search."""
    query = _validate_text(params, "query")
    if not query.valid:
        return query
    location = _validate_text(params, "location")
    if not location.valid:
        return location

    job_type: Optional[JobType] = None
    if params.get("jobType") is not None:
        parsed_type = validate_enum(params.get("jobType"), JobType, name="jobType")
        if not parsed_type.valid:
            return parsed_type
        job_type = parsed_type.data

    min_salary = _validate_salary(params, "minSalary")
    if not min_salary.valid:
        return min_salary
    max_salary = _validate_salary(params, "maxSalary")
    if not max_salary.valid:
        return max_salary
    if (
        min_salary.data is not None
        and max_salary.data is not None
        and min_salary.data > max_salary.data
    ):
        return Invalid("minSalary cannot be greater than maxSalary", field="minSalary")

    sort = params.get("sort", "newest")
    if sort not in SEARCH_SORT_OPTIONS:
        return Invalid(
            f"Invalid sort option. Must be one of: {', '.join(SEARCH_SORT_OPTIONS)}",
            field="sort",
        )

    pagination = validate_pagination(
        params.get("page"), params.get("limit"), max_limit=MAX_SEARCH_PAGE_LIMIT
    )
    if not pagination.valid:
        return pagination

    return Valid(
        JobSearchParams(
            page=pagination.data.page,
            limit=pagination.data.limit,
            query=query.data,
            location=location.data,
            job_type=job_type,
            min_salary=min_salary.data,
            max_salary=max_salary.data,
            sort=sort,
        )
    )


def validate_page_params(params: Mapping[str, str]) -> ValidationOutcome[Pagination]:
    """Validate the ``page`` and ``limit`` query parameters of a listing."""
    return validate_pagination(params.get("page"), params.get("limit"))


def validate_user_list_params(params: Mapping[str, str]) -> ValidationOutcome[UserListCriteria]:
    """Validate the filters of the admin user listing."""
    role: Optional[Role] = None
    if params.get("role") is not None:
        parsed_role = validate_enum(params.get("role"), Role, name="role")
        if not parsed_role.valid:
            return parsed_role
        role = parsed_role.data

    is_active = validate_boolean(params.get("isActive"), name="isActive")
    if not is_active.valid:
        return is_active

    pagination = validate_page_params(params)
    if not pagination.valid:
        return pagination

    return Valid(
        UserListCriteria(
            role=role,
            is_active=is_active.data,
            page=pagination.data.page,
            limit=pagination.data.limit,
        )
    )
