"""Domain services for Gatehouse.

Services contain business logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from gatehouse.domain.services.signup_validator import (
    SignUpValidationError,
    SignUpValidator,
    is_valid_email,
)

__all__ = [
    "SignUpValidationError",
    "SignUpValidator",
    "is_valid_email",
]
