"""Fake cache backend for testing.

In-memory implementation of CacheBackend with TTL semantics driven by an
injectable clock. Records calls and supports error injection so fail-open
paths can be exercised.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from plangate.core.exceptions import TransientStoreError


class FakeCacheBackend:
    """Test implementation of CacheBackend.

    Usage::

        cache = FakeCacheBackend()
        await cache.incr_by("usage:t:m:2024-03", 5, ttl_seconds=60)
        cache.advance(61)
        assert await cache.get("usage:t:m:2024-03") is None
    """

    def __init__(
        self,
        should_raise: Optional[Exception] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize with optional error injection and clock."""
        self._should_raise = should_raise
        self._clock = clock or time.monotonic
        self._offset = 0.0
        self._values: dict[str, Any] = {}
        self._expiry: dict[str, float] = {}
        self._calls: list[tuple[str, tuple]] = []

    # ---- Test helpers ----

    def fail_with(self, error: Optional[Exception]) -> None:
        """Make every subsequent call raise *error* (None to stop)."""
        self._should_raise = error

    def advance(self, seconds: float) -> None:
        """Move the fake clock forward."""
        self._offset += seconds

    def call_count(self, method: str) -> int:
        """Number of times a method was called."""
        return sum(1 for name, _ in self._calls if name == method)

    def ttl(self, key: str) -> Optional[float]:
        """Remaining TTL of *key* in seconds (None when persistent or absent)."""
        self._evict(key)
        if key not in self._expiry:
            return None
        return self._expiry[key] - self._now()

    def seed(self, key: str, value: Any) -> None:
        """Store a raw value without recording a call."""
        self._values[key] = value

    def keys(self) -> list[str]:
        """All live keys."""
        for key in list(self._values):
            self._evict(key)
        return sorted(self._values)

    # ---- Internals ----

    def _now(self) -> float:
        return self._clock() + self._offset

    def _record(self, method: str, *args: Any) -> None:
        self._calls.append((method, args))
        if self._should_raise:
            raise self._should_raise

    def _evict(self, key: str) -> None:
        deadline = self._expiry.get(key)
        if deadline is not None and deadline <= self._now():
            self._values.pop(key, None)
            self._expiry.pop(key, None)

    def _set_ttl(self, key: str, ttl_seconds: Optional[int]) -> None:
        if ttl_seconds:
            self._expiry[key] = self._now() + ttl_seconds

    def _int_value(self, key: str) -> int:
        raw = self._values.get(key)
        if raw is None:
            return 0
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise TransientStoreError(store="fake", message="value is not an integer") from e

    # ---- CacheBackend ----

    async def incr_by(self, key: str, amount: int, ttl_seconds: Optional[int] = None) -> int:
        self._record("incr_by", key, amount)
        self._evict(key)
        value = self._int_value(key) + amount
        self._values[key] = str(value)
        self._set_ttl(key, ttl_seconds)
        return value

    async def decr_by_floor(
        self, key: str, amount: int, ttl_seconds: Optional[int] = None
    ) -> int:
        self._record("decr_by_floor", key, amount)
        self._evict(key)
        value = max(0, self._int_value(key) - amount)
        self._values[key] = str(value)
        self._set_ttl(key, ttl_seconds)
        return value

    async def get(self, key: str) -> Optional[str]:
        self._record("get", key)
        self._evict(key)
        value = self._values.get(key)
        if value is None or isinstance(value, set):
            return None
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        self._record("set", key, value)
        self._values[key] = value
        self._expiry.pop(key, None)
        self._set_ttl(key, ttl_seconds)

    async def expire(self, key: str, ttl_seconds: int) -> None:
        self._record("expire", key, ttl_seconds)
        self._evict(key)
        if key in self._values:
            self._set_ttl(key, ttl_seconds)

    async def exists(self, key: str) -> bool:
        self._record("exists", key)
        self._evict(key)
        return key in self._values

    async def delete(self, *keys: str) -> int:
        self._record("delete", *keys)
        removed = 0
        for key in keys:
            self._evict(key)
            if self._values.pop(key, None) is not None:
                removed += 1
            self._expiry.pop(key, None)
        return removed

    async def sadd(self, key: str, *members: str) -> int:
        self._record("sadd", key, *members)
        self._evict(key)
        current = self._values.setdefault(key, set())
        before = len(current)
        current.update(members)
        return len(current) - before

    async def smembers(self, key: str) -> set[str]:
        self._record("smembers", key)
        self._evict(key)
        value = self._values.get(key)
        return set(value) if isinstance(value, set) else set()
