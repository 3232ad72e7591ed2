"""
Domain-specific errors for the access bounded context.

No framework imports allowed.
"""

from app.domain.errors import AuthenticationFailure, ValidationFailure


class InvalidCredentialsError(AuthenticationFailure):
    """Raised when an email/password pair does not match an account.

    Unknown emails and wrong passwords share this error.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class AccountDisabledError(ValidationFailure):
    """Raised when a disabled account tries to log in."""

    def __init__(self, user_id: str) -> None:
        super().__init__("Account is deactivated", field="account", detail=user_id)
        self.user_id = user_id
