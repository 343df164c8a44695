"""Shared Redis connection.

One connection pool per process. The usage counter store talks to Redis
exclusively through ``RedisCacheBackend``; this module only owns the pool.
"""

import platform
import socket
from typing import Optional

import redis.asyncio as redis

from plangate.core.config import settings
from plangate.core.logging import logger


def _keepalive_options() -> dict:
    if platform.system() == "Darwin" or not hasattr(socket, "TCP_KEEPIDLE"):
        return {}
    return {
        socket.TCP_KEEPIDLE: 60,
        socket.TCP_KEEPINTVL: 10,
        socket.TCP_KEEPCNT: 6,
    }


class RedisClient:
    """Lazily-created ``redis.asyncio.Redis`` wrapper."""

    def __init__(self, url: Optional[str] = None) -> None:
        """Create the wrapper; the connection pool is built on first use."""
        self._url = url or settings.redis_url
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        """Return the shared client, creating it on first access."""
        if self._client is None:
            logger.info(f"Connecting to Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
                socket_keepalive_options=_keepalive_options(),
                health_check_interval=30,
            )
        return self._client

    async def close(self) -> None:
        """Close the connection pool if it was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance
redis_client = RedisClient()
