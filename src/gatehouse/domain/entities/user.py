"""User entity for credential storage.

Users are uniquely identified by ``id`` and, case-insensitively, by email.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def normalize_email(email: str) -> str:
    """Return the lookup key for an email address."""
    return email.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User entity representing a registered account.

    Attributes:
        id: Unique identifier (UUID string), immutable after creation.
        email: Email address as entered at sign-up.
        password_hash: Hashed password (never store plaintext, never expose).
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    id: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.email:
            raise ValueError("Email is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")

    @property
    def email_normalized(self) -> str:
        """Case-insensitive key used for uniqueness and lookup."""
        return normalize_email(self.email)


@dataclass(frozen=True)
class UserSummary:
    """Outward-facing projection of a user: identity only, no secrets."""

    id: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, email=user.email)
