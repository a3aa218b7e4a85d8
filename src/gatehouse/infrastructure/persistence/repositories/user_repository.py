"""User repository for database operations."""

from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.domain.entities import normalize_email
from gatehouse.infrastructure.persistence.models import UserModel


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        The unique index on ``email_normalized`` raises ``IntegrityError``
        on flush when the email is taken.

        Args:
            user: User model to create.

        Returns:
            Created user model.
        """
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by case-insensitive email.

        Args:
            email: Email address in any case.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.email_normalized == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if a case-insensitive email is already registered."""
        result = await self.session.execute(
            select(UserModel.id)
            .where(UserModel.email_normalized == normalize_email(email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Replace a user's password hash and bump ``updated_at``.

        Returns:
            True if a row was updated.
        """
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()
        return result.rowcount > 0

    async def list_all(self) -> list[UserModel]:
        """List every user, oldest first."""
        result = await self.session.execute(
            select(UserModel).order_by(UserModel.created_at.asc())
        )
        return list(result.scalars().all())

    async def count_all(self) -> int:
        """Count total number of users."""
        result = await self.session.execute(select(func.count(UserModel.id)))
        return result.scalar_one() or 0

    async def delete_all(self) -> int:
        """Delete every user.

        Returns:
            Number of deleted rows.
        """
        result = await self.session.execute(delete(UserModel))
        await self.session.flush()
        return result.rowcount or 0
