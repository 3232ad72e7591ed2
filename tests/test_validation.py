"""
Tests for request validation utilities.

Every validator returns an outcome instead of raising; tests inspect
``valid``, the parsed data and the error message.
"""

import json

import pytest
from pydantic import Field

from app.domain.access.entities import Role
from app.domain.hiring.entities import JobType
from app.interfaces.schemas import RequestModel
from app.shared.validation import (
    Pagination,
    validate_body_headers,
    validate_boolean,
    validate_enum,
    validate_job_search_params,
    validate_json_body,
    validate_model,
    validate_pagination,
    validate_query_string,
    validate_user_list_params,
)


class Sample(RequestModel):
    title: str = Field(..., min_length=3)
    salary_min: int = 0


def encode(payload) -> bytes:
    return json.dumps(payload).encode()


class TestJsonBody:
    """Tests for validate_json_body."""

    def test_valid_body(self) -> None:
        outcome = validate_json_body("application/json; charset=utf-8", "13", b'{"title":"x"}')
        assert outcome.valid
        assert outcome.data == {"title": "x"}

    def test_wrong_content_type(self) -> None:
        outcome = validate_json_body("text/plain", None, b"{}")
        assert not outcome.valid
        assert outcome.error == "Content-Type must be application/json"

    def test_missing_content_type(self) -> None:
        assert not validate_json_body(None, None, b"{}").valid

    def test_declared_size_checked_before_parsing(self) -> None:
        """An oversized Content-Length fails even if the body is small."""
        outcome = validate_json_body("application/json", "2048", b"{}", max_size=1024)
        assert not outcome.valid
        assert outcome.error == "Payload too large. Maximum size is 1024 bytes"

    def test_actual_size_checked(self) -> None:
        """A body larger than declared is still rejected."""
        raw = encode({"title": "x" * 200})
        assert not validate_json_body("application/json", "2", raw, max_size=100).valid

    def test_malformed_json(self) -> None:
        outcome = validate_json_body("application/json", None, b"{not json")
        assert not outcome.valid
        assert outcome.error == "Invalid JSON format"

    def test_non_integer_content_length(self) -> None:
        assert not validate_json_body("application/json", "abc", b"{}").valid

    def test_headers_alone(self) -> None:
        """Type and declared size are decided without the body."""
        assert validate_body_headers("application/json", "10", max_size=100).valid
        assert validate_body_headers("application/json", None, max_size=100).valid
        oversized = validate_body_headers("application/json", "101", max_size=100)
        assert oversized.error == "Payload too large. Maximum size is 100 bytes"
        assert not validate_body_headers("text/html", "10").valid


class TestModel:
    """Tests for validate_model."""

    def test_camel_case_payload(self) -> None:
        outcome = validate_model({"title": "Engineer", "salaryMin": 10}, Sample)
        assert outcome.valid
        assert outcome.data.salary_min == 10

    def test_failure_names_field(self) -> None:
        outcome = validate_model({"title": "ab"}, Sample)
        assert not outcome.valid
        assert outcome.error.startswith("title:")
        assert outcome.field == "title"

    def test_unknown_keys_rejected(self) -> None:
        assert not validate_model({"title": "Engineer", "admin": True}, Sample).valid

    def test_non_object_rejected(self) -> None:
        outcome = validate_model(["title"], Sample)
        assert outcome.error == "Request body must be a JSON object"


class TestEnum:
    """Tests for validate_enum."""

    def test_member(self) -> None:
        assert validate_enum("EMPLOYER", Role, "role").data is Role.EMPLOYER

    def test_unknown_value_lists_allowed(self) -> None:
        outcome = validate_enum("OWNER", Role, "role")
        assert outcome.error == "Invalid role. Must be one of: USER, EMPLOYER, ADMIN"

    def test_missing_value(self) -> None:
        assert validate_enum(None, Role, "role").error == "role is required"


class TestPagination:
    """Tests for validate_pagination."""

    def test_defaults(self) -> None:
        assert validate_pagination(None, None).data == Pagination(page=1, limit=20)

    @pytest.mark.parametrize("page", ["0", "-1", "abc", "1.5", ""])
    def test_bad_page(self, page: str) -> None:
        outcome = validate_pagination(page, None)
        assert outcome.error == "page must be a positive integer"

    @pytest.mark.parametrize("limit", ["0", "101", "x"])
    def test_out_of_range_limit_is_rejected_not_clamped(self, limit: str) -> None:
        outcome = validate_pagination("1", limit)
        assert outcome.error == "limit must be between 1 and 100"

    def test_custom_maximum(self) -> None:
        assert not validate_pagination("1", "60", max_limit=50).valid
        assert validate_pagination("2", "50", max_limit=50).data == Pagination(2, 50)


class TestBoolean:
    """Tests for validate_boolean."""

    def test_literals(self) -> None:
        assert validate_boolean("true").data is True
        assert validate_boolean("false").data is False
        assert validate_boolean(None).data is None

    @pytest.mark.parametrize("value", ["1", "yes", "True", ""])
    def test_everything_else_rejected(self, value: str) -> None:
        outcome = validate_boolean(value, "isActive")
        assert outcome.error == 'isActive must be "true" or "false"'


class TestQueryString:
    """Tests for validate_query_string."""

    def test_cap(self) -> None:
        assert validate_query_string("a=1", max_length=10).valid
        outcome = validate_query_string("a=" + "x" * 20, max_length=10)
        assert outcome.error == "Query string too long. Maximum length is 10 characters"


class TestJobSearchParams:
    """Tests for validate_job_search_params."""

    def test_full_search(self) -> None:
        outcome = validate_job_search_params(
            {
                "query": "  engineer ",
                "location": "Paris",
                "jobType": "CONTRACT",
                "minSalary": "1000",
                "maxSalary": "2000",
                "sort": "salary_high",
                "page": "2",
                "limit": "10",
            }
        )
        assert outcome.valid
        params = outcome.data
        assert params.query == "engineer"
        assert params.job_type is JobType.CONTRACT
        assert (params.min_salary, params.max_salary) == (1000, 2000)
        assert (params.page, params.limit, params.sort) == (2, 10, "salary_high")

    def test_blank_text_is_ignored(self) -> None:
        assert validate_job_search_params({"query": "   "}).data.query is None

    def test_inverted_salary_range(self) -> None:
        outcome = validate_job_search_params({"minSalary": "5000", "maxSalary": "10"})
        assert outcome.error == "minSalary cannot be greater than maxSalary"

    def test_salary_bounds(self) -> None:
        assert not validate_job_search_params({"minSalary": "-1"}).valid
        assert not validate_job_search_params({"maxSalary": "10000001"}).valid

    def test_unknown_sort(self) -> None:
        assert validate_job_search_params({"sort": "oldest"}).field == "sort"

    def test_search_limit_is_fifty(self) -> None:
        assert not validate_job_search_params({"limit": "51"}).valid

    def test_long_query(self) -> None:
        assert not validate_job_search_params({"query": "x" * 201}).valid


class TestUserListParams:
    """Tests for validate_user_list_params."""

    def test_filters(self) -> None:
        outcome = validate_user_list_params({"role": "EMPLOYER", "isActive": "false"})
        criteria = outcome.data
        assert criteria.role is Role.EMPLOYER
        assert criteria.is_active is False
        assert (criteria.page, criteria.limit) == (1, 20)

    def test_bad_role(self) -> None:
        assert validate_user_list_params({"role": "ROOT"}).field == "role"

    def test_bad_flag(self) -> None:
        assert validate_user_list_params({"isActive": "no"}).field == "isActive"
