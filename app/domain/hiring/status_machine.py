"""
Domain service: application status state machine.

Lifecycle: APPLIED -> REVIEWING -> SHORTLISTED -> HIRED, with REJECTED
reachable from every non-terminal stage. REJECTED and HIRED are
terminal. No transition returns to APPLIED or to an earlier stage.

Pure business logic. Persisting the result atomically is the job of
ApplicationRepository.compare_and_set_status.
"""

from app.domain.hiring.entities import ApplicationStatus
from app.domain.hiring.errors import InvalidStatusTransitionError, StatusUnchangedError

ALLOWED_TRANSITIONS: dict[ApplicationStatus, tuple[ApplicationStatus, ...]] = {
    ApplicationStatus.APPLIED: (ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED),
    ApplicationStatus.REVIEWING: (ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED),
    ApplicationStatus.SHORTLISTED: (ApplicationStatus.HIRED, ApplicationStatus.REJECTED),
    ApplicationStatus.REJECTED: (),
    ApplicationStatus.HIRED: (),
}

# Pipeline order; a legal transition always moves strictly forward.
_STAGE_ORDER: dict[ApplicationStatus, int] = {
    ApplicationStatus.APPLIED: 0,
    ApplicationStatus.REVIEWING: 1,
    ApplicationStatus.SHORTLISTED: 2,
    ApplicationStatus.REJECTED: 3,
    ApplicationStatus.HIRED: 3,
}


def allowed_targets(current: ApplicationStatus) -> tuple[ApplicationStatus, ...]:
    """Return the statuses reachable from ``current`` in one step."""
    return ALLOWED_TRANSITIONS[current]


def is_terminal(status: ApplicationStatus) -> bool:
    """Return True for statuses without outgoing transitions."""
    return not ALLOWED_TRANSITIONS[status]


def apply_transition(
    current: ApplicationStatus, requested: ApplicationStatus
) -> ApplicationStatus:
    """Validate a status change and return the new status.

    Args:
        current: Status observed on the stored application.
        requested: Status the caller wants to move to.

    Returns:
        The requested status, once validated.

    Raises:
        StatusUnchangedError: If ``requested`` equals ``current``.
        InvalidStatusTransitionError: If the table does not allow the move.
    """
    if requested is current:
        raise StatusUnchangedError(current)

    allowed = ALLOWED_TRANSITIONS[current]
    if requested not in allowed:
        raise InvalidStatusTransitionError(current, requested, allowed)
    return requested


def _check_table() -> None:
    for source, targets in ALLOWED_TRANSITIONS.items():
        for target in targets:
            if target is ApplicationStatus.APPLIED or _STAGE_ORDER[target] <= _STAGE_ORDER[source]:
                raise RuntimeError(
                    f"Transition {source.value} -> {target.value} moves backwards"
                )


_check_table()
