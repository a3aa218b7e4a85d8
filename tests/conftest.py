"""Pytest configuration for all tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from gatehouse.application.services import AuthService
from gatehouse.core.config import get_settings
from gatehouse.infrastructure.auth import InMemorySessionCache, PasswordHasher, TokenIssuer
from gatehouse.infrastructure.persistence import CredentialStore, DatabaseManager
from gatehouse.testing import StoreDiagnostics

TEST_SECRET_KEY = "test-secret-key-not-for-production"


class FakeClock:
    """Controllable clock for token expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _test_env(tmp_path: Path) -> dict[str, str]:
    return {
        "GATEHOUSE_ENVIRONMENT": "testing",
        "GATEHOUSE_LOG_FORMAT": "console",
        "GATEHOUSE_SECRET_KEY": TEST_SECRET_KEY,
        "GATEHOUSE_DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'gatehouse.db'}",
        "GATEHOUSE_SESSION_FILE": str(tmp_path / "session.json"),
        # Cheap Argon2 parameters keep the suite fast
        "GATEHOUSE_ARGON2_TIME_COST": "1",
        "GATEHOUSE_ARGON2_MEMORY_COST": "1024",
        "GATEHOUSE_ARGON2_PARALLELISM": "1",
    }


@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Point configuration at an isolated temp directory."""
    env = _test_env(tmp_path)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield env
    get_settings.cache_clear()


@pytest.fixture
def settings(test_env):
    return get_settings()


@pytest.fixture
def secret_key() -> str:
    return TEST_SECRET_KEY


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def issuer(clock) -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET_KEY, issuer="gatehouse", clock=clock)


@pytest_asyncio.fixture
async def db(tmp_path) -> AsyncGenerator[DatabaseManager, None]:
    """File-backed SQLite database, so concurrent sessions use separate connections."""
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await manager.create_tables()
    yield manager
    await manager.disconnect()


@pytest.fixture
def store(db, hasher) -> CredentialStore:
    return CredentialStore(db, hasher, timeout_seconds=5.0)


@pytest.fixture
def diagnostics(db) -> StoreDiagnostics:
    return StoreDiagnostics(db)


@pytest.fixture
def auth_service(store, hasher, issuer, settings) -> AuthService:
    return AuthService(store, hasher, issuer, settings=settings)


@pytest.fixture
def session_cache() -> InMemorySessionCache:
    return InMemorySessionCache()
