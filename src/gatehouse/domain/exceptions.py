"""Exceptions raised by the credential and session core.

Each exception carries a caller-safe ``message``. The auth service maps
them onto ``AuthResponse`` failures; none of them escape its boundary.
"""


class AuthError(Exception):
    """Base class for all authentication errors."""

    default_message = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class CredentialValidationError(AuthError):
    """Raised when sign-up input is missing or malformed."""

    default_message = "Invalid input"


class DuplicateEmailError(AuthError):
    """Raised when an account already exists for a case-insensitive email."""

    default_message = "An account with this email already exists"


class InvalidCredentialsError(AuthError):
    """Raised when an email/password pair does not authenticate.

    The message never says which of the two was wrong.
    """

    default_message = "Invalid email or password"


class StoreUnavailableError(AuthError):
    """Raised when the credential store times out or its driver fails."""

    default_message = "Credential store unavailable"
