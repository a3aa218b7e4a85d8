"""Unit tests for session cache implementations."""

import asyncio
import json
from unittest.mock import patch

import pytest

from gatehouse.infrastructure.auth.session_cache import (
    TOKEN_KEY,
    FileSessionCache,
    InMemorySessionCache,
)


@pytest.fixture(params=["memory", "file"])
def cache(request, tmp_path):
    """Run each contract test against both implementations."""
    if request.param == "memory":
        return InMemorySessionCache()
    return FileSessionCache(tmp_path / "sessions" / "session.json")


class TestSessionCacheContract:

    @pytest.mark.asyncio
    async def test_empty_cache_reads_none(self, cache):
        assert await cache.get() is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache):
        await cache.set("token-1")

        assert await cache.get() == "token-1"

    @pytest.mark.asyncio
    async def test_set_replaces_previous_token(self, cache):
        await cache.set("token-1")
        await cache.set("token-2")

        assert await cache.get() == "token-2"

    @pytest.mark.asyncio
    async def test_set_empty_token_raises(self, cache):
        with pytest.raises(ValueError):
            await cache.set("")

    @pytest.mark.asyncio
    async def test_clear_is_idempotent(self, cache):
        await cache.set("token-1")

        await cache.clear()
        await cache.clear()

        assert await cache.get() is None

    @pytest.mark.asyncio
    async def test_discard_matching_token(self, cache):
        await cache.set("token-1")

        assert await cache.discard("token-1") is True
        assert await cache.get() is None

    @pytest.mark.asyncio
    async def test_discard_leaves_newer_token(self, cache):
        """A stale check must not wipe a token stored after it read the slot."""
        await cache.set("token-2")

        assert await cache.discard("token-1") is False
        assert await cache.get() == "token-2"

    @pytest.mark.asyncio
    async def test_concurrent_access_is_serialised(self, cache):
        async def writer(i: int) -> None:
            await cache.set(f"token-{i}")
            await cache.get()

        await asyncio.gather(*(writer(i) for i in range(20)))

        assert (await cache.get()).startswith("token-")


class TestInMemorySessionCache:

    @pytest.mark.asyncio
    async def test_initial_token(self):
        cache = InMemorySessionCache(token="seeded")

        assert await cache.get() == "seeded"

    @pytest.mark.asyncio
    async def test_instances_are_independent(self):
        first, second = InMemorySessionCache(), InMemorySessionCache()
        await first.set("token-1")

        assert await second.get() is None


class TestFileSessionCache:

    @pytest.mark.asyncio
    async def test_file_format(self, tmp_path):
        path = tmp_path / "session.json"
        cache = FileSessionCache(path)

        await cache.set("token-1")

        assert json.loads(path.read_text(encoding="utf-8")) == {TOKEN_KEY: "token-1"}

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "a" / "b" / "session.json"

        await FileSessionCache(path).set("token-1")

        assert path.exists()

    @pytest.mark.asyncio
    async def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "session.json"
        cache = FileSessionCache(path)
        await cache.set("token-1")

        await cache.clear()

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_survives_new_instance(self, tmp_path):
        path = tmp_path / "session.json"
        await FileSessionCache(path).set("token-1")

        assert await FileSessionCache(path).get() == "token-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        ["not json", "[]", '{"auth_token": 42}', '{"auth_token": ""}', "{}"],
    )
    async def test_unreadable_file_reads_as_signed_out(self, tmp_path, content):
        path = tmp_path / "session.json"
        path.write_text(content, encoding="utf-8")

        assert await FileSessionCache(path).get() is None

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path):
        cache = FileSessionCache(tmp_path / "session.json")

        await cache.set("token-1")
        await cache.set("token-2")

        assert [p.name for p in tmp_path.iterdir()] == ["session.json"]

    @pytest.mark.asyncio
    async def test_file_io_runs_in_worker_thread(self, tmp_path):
        cache = FileSessionCache(tmp_path / "session.json")

        with patch("asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            await cache.set("token-1")
            assert await cache.get() == "token-1"

        assert [c.args[0] for c in to_thread.call_args_list] == [
            cache._write_file,
            cache._read_file,
        ]
