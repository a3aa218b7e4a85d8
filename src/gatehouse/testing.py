"""Test-only helpers for inspecting and resetting a credential store.

Not exported from ``gatehouse`` and not reachable from the CLI. Import it
explicitly from test code.
"""

from gatehouse.core.logging import get_logger
from gatehouse.domain.entities import User
from gatehouse.infrastructure.persistence import DatabaseManager
from gatehouse.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class StoreDiagnostics:
    """Raw access to every stored user record."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def list_all(self) -> list[User]:
        """Return every user, oldest first."""
        async with self.db.session() as session:
            models = await UserRepository(session).list_all()
            return [model.to_entity() for model in models]

    async def count(self) -> int:
        async with self.db.session() as session:
            return await UserRepository(session).count_all()

    async def clear_all(self) -> int:
        """Delete every user.

        Returns:
            Number of deleted users.
        """
        async with self.db.session() as session:
            deleted = await UserRepository(session).delete_all()
            await session.commit()
        logger.warning("All users cleared", deleted=deleted)
        return deleted
