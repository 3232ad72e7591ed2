"""Salary range rule shared by job creation and update."""

from typing import Optional

from app.domain.errors import ValidationFailure


def check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    """Raise ValidationFailure unless ``salary_min <= salary_max``.

    Either bound may be missing.
    """
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValidationFailure(
            "Minimum salary cannot be greater than maximum salary",
            field="salaryMin",
        )
