"""Durable registry of user credentials keyed by case-insensitive email.

Account creation is an atomic check-and-create: writers for the same email
are serialised by a per-email lock inside this process, and the unique
index on ``users.email_normalized`` rejects duplicates from any other
writer. Every mutation is committed before the call returns.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.core.config import get_settings
from gatehouse.core.logging import get_logger
from gatehouse.domain.entities import User
from gatehouse.domain.exceptions import DuplicateEmailError, StoreUnavailableError
from gatehouse.infrastructure.auth.password_hasher import PasswordHasher
from gatehouse.infrastructure.persistence.database import DatabaseManager
from gatehouse.infrastructure.persistence.models import UserModel
from gatehouse.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

T = TypeVar("T")


class _KeyedLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.holders = 0


class CredentialStore:
    """Creates, finds and validates user credentials."""

    def __init__(
        self,
        db: DatabaseManager,
        hasher: PasswordHasher,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            db: Database manager providing sessions.
            hasher: Hasher used to verify passwords in ``validate``.
            timeout_seconds: Bound for each store round trip. Defaults to
                ``store_timeout_seconds``.
        """
        self.db = db
        self._hasher = hasher
        self.timeout_seconds = timeout_seconds or get_settings().store_timeout_seconds
        self._email_locks: dict[str, _KeyedLock] = {}

    async def create(self, email: str, password_hash: str) -> User:
        """Create and persist a new user.

        Args:
            email: Email as entered; uniqueness is case-insensitive.
            password_hash: Already-hashed password.

        Returns:
            The committed user.

        Raises:
            DuplicateEmailError: If the email is already registered.
            StoreUnavailableError: On timeout or storage failure.
        """
        email = email.strip()
        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

        async def _create(session: AsyncSession) -> User:
            repo = UserRepository(session)
            if await repo.email_exists(email):
                raise DuplicateEmailError()
            try:
                await repo.create(UserModel.from_entity(user))
                await session.commit()
            except IntegrityError as e:
                raise DuplicateEmailError() from e
            return user

        async with self._email_lock(user.email_normalized):
            try:
                created = await self._run("create", _create)
            except DuplicateEmailError:
                logger.info("User creation rejected: duplicate email", email=email)
                raise

        logger.info("User created", user_id=created.id, email=created.email)
        return created

    async def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup by email."""

        async def _find(session: AsyncSession) -> User | None:
            model = await UserRepository(session).get_by_email(email)
            return model.to_entity() if model else None

        user = await self._run("find_by_email", _find)
        logger.debug("User lookup by email", email=email, found=user is not None)
        return user

    async def find_by_id(self, user_id: str) -> User | None:
        """Lookup by user id."""

        async def _find(session: AsyncSession) -> User | None:
            model = await UserRepository(session).get_by_id(user_id)
            return model.to_entity() if model else None

        return await self._run("find_by_id", _find)

    async def validate(self, email: str, password: str) -> User | None:
        """Return the user only if the email exists and the password matches.

        An unknown email still pays for one hash verification so response
        time does not reveal whether it is registered.
        """
        user = await self.find_by_email(email)
        if user is None:
            # dummy_hash is built on first use, so that also happens off the loop
            await asyncio.to_thread(
                lambda: self._hasher.verify(password, self._hasher.dummy_hash)
            )
            logger.info("Credential check failed: unknown email", email=email)
            return None

        if not await asyncio.to_thread(self._hasher.verify, password, user.password_hash):
            logger.info("Credential check failed: wrong password", user_id=user.id)
            return None

        return user

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Replace a stored hash, e.g. after a cost-parameter upgrade.

        Returns:
            True if the user existed and was updated.
        """

        async def _update(session: AsyncSession) -> bool:
            updated = await UserRepository(session).update_password_hash(user_id, password_hash)
            await session.commit()
            return updated

        updated = await self._run("update_password_hash", _update)
        logger.info("Password hash updated", user_id=user_id, updated=updated)
        return updated

    async def _run(self, operation: str, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run ``fn`` in a fresh session, bounded by the store timeout."""

        async def _in_session() -> T:
            async with self.db.session() as session:
                return await fn(session)

        try:
            return await asyncio.wait_for(_in_session(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(
                "Credential store timed out",
                operation=operation,
                timeout_seconds=self.timeout_seconds,
            )
            raise StoreUnavailableError(f"Credential store timed out during {operation}") from e
        except SQLAlchemyError as e:
            logger.error("Credential store failure", operation=operation, error=str(e))
            raise StoreUnavailableError(f"Credential store failed during {operation}") from e

    @asynccontextmanager
    async def _email_lock(self, key: str) -> AsyncIterator[None]:
        entry = self._email_locks.get(key)
        if entry is None:
            entry = self._email_locks[key] = _KeyedLock()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._email_locks[key]
