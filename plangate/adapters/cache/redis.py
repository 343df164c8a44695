"""Redis implementation of the CacheBackend protocol.

Increment and TTL refresh run in a single MULTI/EXEC pipeline. The clamped
decrement runs as a server-side Lua script so the read-modify-write can't
interleave with other writers on the same key.

Every ``redis.RedisError`` is translated to ``TransientStoreError`` here so
callers never depend on the driver's exception types.
"""

from __future__ import annotations

import functools
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from plangate.core.exceptions import TransientStoreError

_DECR_FLOOR_SCRIPT = """
local value = redis.call('DECRBY', KEYS[1], ARGV[1])
if value < 0 then
  redis.call('SET', KEYS[1], '0')
  value = 0
end
local ttl = tonumber(ARGV[2])
if ttl and ttl > 0 then
  redis.call('EXPIRE', KEYS[1], ttl)
end
return value
"""


def _wrap_redis_errors(fn):
    """Decorator: translate RedisError into TransientStoreError."""

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except RedisError as e:
            raise TransientStoreError(store="redis", message=str(e)) from e

    return wrapper


class RedisCacheBackend:
    """CacheBackend over a ``redis.asyncio`` client with ``decode_responses=True``."""

    def __init__(self, client: redis.Redis) -> None:
        """Wrap an existing client; the connection pool is owned by the caller."""
        self._client = client
        self._decr_floor = client.register_script(_DECR_FLOOR_SCRIPT)

    @_wrap_redis_errors
    async def incr_by(self, key: str, amount: int, ttl_seconds: Optional[int] = None) -> int:
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.incrby(key, amount)
            if ttl_seconds:
                pipe.expire(key, ttl_seconds)
            results = await pipe.execute()
        return int(results[0])

    @_wrap_redis_errors
    async def decr_by_floor(
        self, key: str, amount: int, ttl_seconds: Optional[int] = None
    ) -> int:
        value = await self._decr_floor(keys=[key], args=[amount, ttl_seconds or 0])
        return int(value)

    @_wrap_redis_errors
    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    @_wrap_redis_errors
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        await self._client.set(key, value, ex=ttl_seconds or None)

    @_wrap_redis_errors
    async def expire(self, key: str, ttl_seconds: int) -> None:
        await self._client.expire(key, ttl_seconds)

    @_wrap_redis_errors
    async def exists(self, key: str) -> bool:
        return bool(await self._client.exists(key))

    @_wrap_redis_errors
    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._client.delete(*keys))

    @_wrap_redis_errors
    async def sadd(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(await self._client.sadd(key, *members))

    @_wrap_redis_errors
    async def smembers(self, key: str) -> set[str]:
        return set(await self._client.smembers(key))
