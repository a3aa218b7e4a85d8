"""Domain entities for Gatehouse.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from gatehouse.domain.entities.user import User, UserSummary, normalize_email

__all__ = [
    "User",
    "UserSummary",
    "normalize_email",
]
