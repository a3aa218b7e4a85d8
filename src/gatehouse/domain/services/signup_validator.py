"""Sign-up input validation service.

Checks run in a fixed order and the first failure is the one reported:
- All fields present
- Password confirmation matches
- Minimum password length
- Minimal email shape (local part, ``@``, dotted domain)
"""

import re
from dataclasses import dataclass

from gatehouse.domain.exceptions import CredentialValidationError

# local@domain.tld: one "@", no whitespace, and a dot with text on both sides
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")


@dataclass(frozen=True)
class SignUpValidationError:
    """Represents a sign-up validation error.

    Attributes:
        field: The offending field name.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class SignUpValidator:
    """Validates the email/password/confirmation triple of a sign-up request."""

    def __init__(self, min_password_length: int = 6) -> None:
        self.min_password_length = min_password_length

    def validate(
        self, email: str, password: str, confirm_password: str
    ) -> list[SignUpValidationError]:
        """Validate sign-up input.

        Args:
            email: Email as entered.
            password: Plaintext password.
            confirm_password: Plaintext confirmation.

        Returns:
            Validation errors in reporting order. Empty list if input is valid.
        """
        if not (email or "").strip() or not password or not confirm_password:
            # Nothing else is meaningful until every field is filled in
            return [
                SignUpValidationError(
                    field="*",
                    message="All fields are required",
                    code="fields_required",
                )
            ]

        errors: list[SignUpValidationError] = []

        if confirm_password != password:
            errors.append(
                SignUpValidationError(
                    field="confirm_password",
                    message="Passwords do not match",
                    code="password_mismatch",
                )
            )

        if len(password) < self.min_password_length:
            errors.append(
                SignUpValidationError(
                    field="password",
                    message=f"Password must be at least {self.min_password_length} characters",
                    code="password_too_short",
                )
            )

        if not is_valid_email(email):
            errors.append(
                SignUpValidationError(
                    field="email",
                    message="Please enter a valid email address",
                    code="email_invalid",
                )
            )

        return errors

    def check(self, email: str, password: str, confirm_password: str) -> None:
        """Raise on the first validation failure.

        Raises:
            CredentialValidationError: If any check fails.
        """
        errors = self.validate(email, password, confirm_password)
        if errors:
            raise CredentialValidationError(errors[0].message)


def is_valid_email(email: str) -> bool:
    """Minimal shape check: ``local@domain.tld``."""
    return EMAIL_PATTERN.match(email.strip()) is not None
