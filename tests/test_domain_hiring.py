"""
Tests for the hiring domain layer.

Tests the application status state machine and the error taxonomy.
No infrastructure needed.
"""

import pytest

from app.domain.errors import Conflict, ErrorKind, NotFound, ValidationFailure
from app.domain.hiring.entities import ApplicationStatus, Page
from app.domain.hiring.errors import (
    InvalidStatusTransitionError,
    StaleStatusError,
    StatusUnchangedError,
)
from app.domain.hiring.status_machine import (
    ALLOWED_TRANSITIONS,
    allowed_targets,
    apply_transition,
    is_terminal,
)

S = ApplicationStatus


class TestStatusMachine:
    """Tests for apply_transition."""

    @pytest.mark.parametrize(
        "current,requested",
        [
            (S.APPLIED, S.REVIEWING),
            (S.APPLIED, S.REJECTED),
            (S.REVIEWING, S.SHORTLISTED),
            (S.REVIEWING, S.REJECTED),
            (S.SHORTLISTED, S.HIRED),
            (S.SHORTLISTED, S.REJECTED),
        ],
    )
    def test_forward_transitions_are_allowed(self, current, requested) -> None:
        """Every edge of the pipeline returns the requested status."""
        assert apply_transition(current, requested) is requested

    def test_same_status_is_rejected(self) -> None:
        """Requesting the current status fails with StatusUnchangedError."""
        with pytest.raises(StatusUnchangedError) as exc_info:
            apply_transition(S.REVIEWING, S.REVIEWING)
        assert exc_info.value.message == "Application status is already set to REVIEWING"

    def test_backwards_transition_names_allowed_targets(self) -> None:
        """REVIEWING -> APPLIED fails and lists SHORTLISTED and REJECTED."""
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            apply_transition(S.REVIEWING, S.APPLIED)
        error = exc_info.value
        assert error.allowed == (S.SHORTLISTED, S.REJECTED)
        assert "Allowed transitions: SHORTLISTED, REJECTED" in error.message
        assert error.kind is ErrorKind.VALIDATION

    def test_skipping_a_stage_is_rejected(self) -> None:
        """APPLIED cannot jump straight to HIRED."""
        with pytest.raises(InvalidStatusTransitionError):
            apply_transition(S.APPLIED, S.HIRED)

    @pytest.mark.parametrize("terminal", [S.REJECTED, S.HIRED])
    def test_terminal_states_have_no_exit(self, terminal) -> None:
        """Nothing leaves REJECTED or HIRED."""
        assert is_terminal(terminal)
        for target in S:
            if target is terminal:
                continue
            with pytest.raises(InvalidStatusTransitionError) as exc_info:
                apply_transition(terminal, target)
            assert "none (terminal state)" in exc_info.value.message

    def test_no_transition_returns_to_applied(self) -> None:
        """APPLIED is never a target."""
        for source in S:
            assert S.APPLIED not in allowed_targets(source)

    def test_table_covers_every_status(self) -> None:
        """Each status has an entry in the transition table."""
        assert set(ALLOWED_TRANSITIONS) == set(S)


class TestErrorTaxonomy:
    """Tests for taxonomy variants used by the hiring context."""

    def test_stale_status_is_conflict(self) -> None:
        """A lost compare-and-swap maps to the conflict kind with its own code."""
        error = StaleStatusError("app-1", S.APPLIED)
        assert isinstance(error, Conflict)
        assert error.kind is ErrorKind.CONFLICT
        assert error.code == "STATUS_CONFLICT"

    def test_not_found_names_the_resource(self) -> None:
        """NotFound builds its message from the resource name."""
        error = NotFound("job", "job-1")
        assert error.message == "Job not found"
        assert error.resource_id == "job-1"

    def test_validation_failure_keeps_field(self) -> None:
        """The offending field is kept as structured data."""
        error = ValidationFailure("bad", field="title")
        assert error.field == "title"
        assert error.resource == "title"


class TestPage:
    """Tests for paging metadata."""

    def test_metadata(self) -> None:
        """41 rows at 20 per page make three pages."""
        page = Page(items=[], total=41, page=2, limit=20)
        assert page.total_pages == 3
        assert page.has_next_page
        assert page.has_previous_page

    def test_empty_listing(self) -> None:
        """An empty listing has no pages in either direction."""
        page = Page(items=[], total=0, page=1, limit=20)
        assert page.total_pages == 0
        assert not page.has_next_page
        assert not page.has_previous_page
