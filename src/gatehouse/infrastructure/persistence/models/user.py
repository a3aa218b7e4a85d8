"""SQLAlchemy model for the users table.

Users are uniquely identified by id and, case-insensitively, by email.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from gatehouse.domain.entities import User
from gatehouse.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (UUID string).
        email: Email address as entered.
        email_normalized: Lower-cased email carrying the unique index.
        password_hash: Argon2 hash.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User email address as entered",
    )
    email_normalized: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Lower-cased email, unique across users",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def to_entity(self) -> User:
        """Convert to the domain entity."""
        return User(
            id=self.id,
            email=self.email,
            password_hash=self.password_hash,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )

    @classmethod
    def from_entity(cls, user: User) -> "UserModel":
        return cls(
            id=user.id,
            email=user.email,
            email_normalized=user.email_normalized,
            password_hash=user.password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


def _as_utc(moment: datetime) -> datetime:
    # SQLite returns naive datetimes; values are always written in UTC
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
