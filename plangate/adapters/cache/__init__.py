"""Cache backend adapters."""

from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.adapters.cache.redis import RedisCacheBackend

__all__ = ["FakeCacheBackend", "RedisCacheBackend"]
