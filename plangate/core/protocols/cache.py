"""Key-value cache protocol backing the usage counter store.

Only single-key operations are exposed; each one must be atomic on its
own. Implementations raise ``TransientStoreError`` when the backing store
is unreachable.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Minimal atomic cache surface (Redis-shaped)."""

    async def incr_by(self, key: str, amount: int, ttl_seconds: Optional[int] = None) -> int:
        """Atomically add *amount* to the integer at *key*, refreshing its TTL."""
        ...

    async def decr_by_floor(
        self, key: str, amount: int, ttl_seconds: Optional[int] = None
    ) -> int:
        """Atomically subtract *amount*, storing 0 instead of a negative result."""
        ...

    async def get(self, key: str) -> Optional[str]:
        """Return the raw value at *key*, or None when absent."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Store *value* at *key*, optionally expiring after *ttl_seconds*."""
        ...

    async def expire(self, key: str, ttl_seconds: int) -> None:
        """Set the TTL of an existing key."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if *key* is present."""
        ...

    async def delete(self, *keys: str) -> int:
        """Delete *keys*; returns the number removed."""
        ...

    async def sadd(self, key: str, *members: str) -> int:
        """Add members to the set at *key*."""
        ...

    async def smembers(self, key: str) -> set[str]:
        """Return all members of the set at *key* (empty when absent)."""
        ...
