"""Unit tests for the cache backends.

RedisCacheBackend is exercised against a mocked ``redis.asyncio`` client;
FakeCacheBackend TTL semantics are checked directly.
"""

import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.adapters.cache.redis import RedisCacheBackend
from plangate.core.exceptions import TransientStoreError
from plangate.core.protocols.cache import CacheBackend


@pytest.fixture
def mock_client():
    """Mock redis.asyncio client with a pipeline and a registered script."""
    client = MagicMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[5, True])
    client.pipeline.return_value.__aenter__ = AsyncMock(return_value=pipe)
    client.pipeline.return_value.__aexit__ = AsyncMock(return_value=False)
    client.register_script.return_value = AsyncMock(return_value=0)
    client.get = AsyncMock(return_value="7")
    client.set = AsyncMock()
    client.expire = AsyncMock()
    client.exists = AsyncMock(return_value=1)
    client.delete = AsyncMock(return_value=2)
    client.sadd = AsyncMock(return_value=1)
    client.smembers = AsyncMock(return_value={"api_calls"})
    client._pipe = pipe
    return client


class TestProtocolConformance:
    def test_redis_backend(self, mock_client):
        assert isinstance(RedisCacheBackend(mock_client), CacheBackend)

    def test_fake_backend(self):
        assert isinstance(FakeCacheBackend(), CacheBackend)

    @pytest.mark.parametrize("cls", [CacheBackend, RedisCacheBackend, FakeCacheBackend])
    def test_smembers_returns_builtin_set(self, cls):
        """The class-level `set` method must not shadow the builtin in annotations."""
        hints = inspect.get_annotations(cls.smembers, eval_str=True)
        assert hints["return"] == set[str]


class TestRedisCacheBackend:
    @pytest.mark.asyncio
    async def test_incr_by_refreshes_ttl_in_one_transaction(self, mock_client):
        backend = RedisCacheBackend(mock_client)

        assert await backend.incr_by("k", 5, ttl_seconds=60) == 5

        mock_client.pipeline.assert_called_once_with(transaction=True)
        mock_client._pipe.incrby.assert_called_once_with("k", 5)
        mock_client._pipe.expire.assert_called_once_with("k", 60)

    @pytest.mark.asyncio
    async def test_incr_by_without_ttl(self, mock_client):
        backend = RedisCacheBackend(mock_client)

        await backend.incr_by("k", 1)

        mock_client._pipe.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_decr_by_floor_runs_script(self, mock_client):
        backend = RedisCacheBackend(mock_client)
        script = mock_client.register_script.return_value

        assert await backend.decr_by_floor("k", 3, ttl_seconds=60) == 0

        script.assert_awaited_once_with(keys=["k"], args=[3, 60])

    @pytest.mark.asyncio
    async def test_simple_commands(self, mock_client):
        backend = RedisCacheBackend(mock_client)

        assert await backend.get("k") == "7"
        assert await backend.exists("k") is True
        assert await backend.delete("a", "b") == 2
        assert await backend.delete() == 0
        assert await backend.sadd("s", "api_calls") == 1
        assert await backend.sadd("s") == 0
        assert await backend.smembers("s") == {"api_calls"}

        await backend.set("k", "1")
        mock_client.set.assert_awaited_once_with("k", "1", ex=None)

    @pytest.mark.asyncio
    async def test_redis_errors_become_transient_store_errors(self, mock_client):
        mock_client.get = AsyncMock(side_effect=RedisConnectionError("connection refused"))
        backend = RedisCacheBackend(mock_client)

        with pytest.raises(TransientStoreError) as exc_info:
            await backend.get("k")

        assert exc_info.value.service_name == "redis"


class TestFakeCacheBackend:
    @pytest.mark.asyncio
    async def test_ttl_expiry(self):
        cache = FakeCacheBackend()
        await cache.set("k", "v", ttl_seconds=10)

        cache.advance(9)
        assert await cache.get("k") == "v"
        cache.advance(2)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_expire_on_missing_key_is_noop(self):
        cache = FakeCacheBackend()

        await cache.expire("missing", 10)

        assert cache.keys() == []

    @pytest.mark.asyncio
    async def test_decr_by_floor(self):
        cache = FakeCacheBackend()
        await cache.incr_by("k", 2)

        assert await cache.decr_by_floor("k", 5) == 0

    @pytest.mark.asyncio
    async def test_error_injection(self):
        cache = FakeCacheBackend(should_raise=TransientStoreError())

        with pytest.raises(TransientStoreError):
            await cache.get("k")
        assert cache.call_count("get") == 1
