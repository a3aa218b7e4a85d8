"""Client-side session storage.

A session is a single slot holding the bearer token of one client context.
Every read and write goes through a per-instance ``asyncio.Lock`` so a
sign-out racing a session check cannot interleave with it.
"""

import asyncio
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from gatehouse.core.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "auth_token"


class SessionCache(ABC):
    """Single-slot token storage for one client context."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def get(self) -> str | None:
        """Return the stored token, or None when signed out."""
        async with self._lock:
            return await self._read()

    async def set(self, token: str) -> None:
        """Store ``token``, replacing any previous one."""
        if not token:
            raise ValueError("token is required")
        async with self._lock:
            await self._write(token)

    async def clear(self) -> None:
        """Remove the stored token. No-op when empty."""
        async with self._lock:
            if await self._read() is not None:
                await self._write(None)

    async def discard(self, token: str) -> bool:
        """Remove ``token`` only if it is still the stored one.

        Returns:
            True if the slot was cleared.
        """
        async with self._lock:
            if await self._read() != token:
                return False
            await self._write(None)
            return True

    @abstractmethod
    async def _read(self) -> str | None:
        """Read the slot. Called with the lock held."""

    @abstractmethod
    async def _write(self, token: str | None) -> None:
        """Write the slot (None clears it). Called with the lock held."""


class InMemorySessionCache(SessionCache):
    """Process-local session slot."""

    def __init__(self, token: str | None = None) -> None:
        super().__init__()
        self._token = token

    async def _read(self) -> str | None:
        return self._token

    async def _write(self, token: str | None) -> None:
        self._token = token


class FileSessionCache(SessionCache):
    """Session slot persisted as a small JSON document on disk.

    The document is ``{"auth_token": "<token>"}``. A missing or unreadable
    file reads as no session.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    async def _read(self) -> str | None:
        return await asyncio.to_thread(self._read_file)

    async def _write(self, token: str | None) -> None:
        await asyncio.to_thread(self._write_file, token)

    def _read_file(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Session file unreadable", path=str(self.path), error=str(e))
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def _write_file(self, token: str | None) -> None:
        if token is None:
            self.path.unlink(missing_ok=True)
            return
        self._atomic_write({TOKEN_KEY: token})

    def _atomic_write(self, payload: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8"
        ) as tf:
            json.dump(payload, tf)
            temp_path = Path(tf.name)
        try:
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
