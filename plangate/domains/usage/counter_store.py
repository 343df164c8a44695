"""Usage counter store: live per-tenant, per-metric, per-month counters.

Key layout in the cache:

    usage:{tenant}:{metric}:{YYYY-MM}    counter (TTL, clamped at zero)
    usage-metrics:{tenant}                set of metric names ever written
    limits:{tenant}:{metric}              optional cache-level limit override
    thresholds:{tenant}:{metric}:{pct}    one-shot threshold notification flag

Each operation touches single keys only. Counter, registry and flags are
updated independently and converge within a few operations.
"""

from datetime import datetime
from typing import Callable, Iterable, Optional
from uuid import UUID

from plangate.core.datetime_utils import month_label, utc_now
from plangate.core.logging import logger
from plangate.core.protocols.cache import CacheBackend
from plangate.domains.usage.protocols import UsageCounterStoreProtocol
from plangate.domains.usage.types import THRESHOLD_PERCENTAGES, parse_counter


def usage_key(tenant_id: UUID, metric: str, period: str) -> str:
    return f"usage:{tenant_id}:{metric}:{period}"


def metrics_key(tenant_id: UUID) -> str:
    return f"usage-metrics:{tenant_id}"


def limit_key(tenant_id: UUID, metric: str) -> str:
    return f"limits:{tenant_id}:{metric}"


def threshold_key(tenant_id: UUID, metric: str, pct: int) -> str:
    return f"thresholds:{tenant_id}:{metric}:{pct}"


class UsageCounterStore(UsageCounterStoreProtocol):
    """Cache-backed usage counters.

    Errors from the cache surface as ``TransientStoreError``; callers decide
    whether to fail open (enforcement) or log and move on (reconciliation).
    """

    def __init__(
        self,
        cache: CacheBackend,
        counter_ttl_seconds: int,
        threshold_ttl_seconds: int,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize with a cache backend, TTLs and a clock for the current period."""
        self._cache = cache
        self._counter_ttl = counter_ttl_seconds
        self._threshold_ttl = threshold_ttl_seconds
        self._clock = clock

    def current_period(self) -> str:
        """Label of the current UTC calendar month."""
        return month_label(self._clock())

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    async def increment(self, tenant_id: UUID, metric: str, amount: int = 1) -> int:
        """Add *amount* to this month's counter; ``amount <= 0`` is a read."""
        if amount <= 0:
            return await self.read(tenant_id, metric)
        key = usage_key(tenant_id, metric, self.current_period())
        value = await self._cache.incr_by(key, amount, ttl_seconds=self._counter_ttl)
        await self._register_metric(tenant_id, metric)
        return value

    async def decrement(self, tenant_id: UUID, metric: str, amount: int = 1) -> int:
        """Subtract *amount* from this month's counter, never going below zero."""
        if amount <= 0:
            return await self.read(tenant_id, metric)
        key = usage_key(tenant_id, metric, self.current_period())
        value = await self._cache.decr_by_floor(key, amount, ttl_seconds=self._counter_ttl)
        await self._register_metric(tenant_id, metric)
        return value

    async def delta(self, tenant_id: UUID, metric: str, amount: int) -> int:
        """Dispatch a signed change to increment/decrement; zero is a read."""
        if amount > 0:
            return await self.increment(tenant_id, metric, amount)
        if amount < 0:
            return await self.decrement(tenant_id, metric, -amount)
        return await self.read(tenant_id, metric)

    async def read(self, tenant_id: UUID, metric: str, period: Optional[str] = None) -> int:
        """Counter value for *period* (default: current month). Absent reads as 0."""
        raw = await self._cache.get(usage_key(tenant_id, metric, period or self.current_period()))
        return parse_counter(raw)

    async def clear_period(self, tenant_id: UUID, metric: str, period: str) -> None:
        """Delete a closed period's counter."""
        await self._cache.delete(usage_key(tenant_id, metric, period))

    async def list_metrics(self, tenant_id: UUID) -> set[str]:
        """Metric names the tenant has written since the registry last expired."""
        return await self._cache.smembers(metrics_key(tenant_id))

    async def _register_metric(self, tenant_id: UUID, metric: str) -> None:
        key = metrics_key(tenant_id)
        await self._cache.sadd(key, metric)
        await self._cache.expire(key, self._counter_ttl)

    # ------------------------------------------------------------------
    # Cache-level limit override
    # ------------------------------------------------------------------

    async def set_limit(self, tenant_id: UUID, metric: str, limit: Optional[int]) -> None:
        """Set (or with ``None`` remove) the cache-level limit for a metric."""
        key = limit_key(tenant_id, metric)
        if limit is None:
            await self._cache.delete(key)
            return
        await self._cache.set(key, str(int(limit)))

    async def get_limit(self, tenant_id: UUID, metric: str) -> Optional[int]:
        """Cache-level limit for a metric, or None when not set."""
        raw = await self._cache.get(limit_key(tenant_id, metric))
        if raw is None:
            return None
        try:
            return int(float(raw))
        except (ValueError, OverflowError):
            logger.with_context(tenant_id=str(tenant_id), metric=metric).warning(
                f"Ignoring unparseable cached limit {raw!r}"
            )
            return None

    # ------------------------------------------------------------------
    # Threshold flags
    # ------------------------------------------------------------------

    async def mark_triggered(self, tenant_id: UUID, metric: str, pct: int) -> None:
        """Record that the *pct* threshold notification was sent this cycle."""
        await self._cache.set(
            threshold_key(tenant_id, metric, pct), "1", ttl_seconds=self._threshold_ttl
        )

    async def is_triggered(self, tenant_id: UUID, metric: str, pct: int) -> bool:
        return await self._cache.exists(threshold_key(tenant_id, metric, pct))

    async def clear_triggered(
        self,
        tenant_id: UUID,
        metric: str,
        percentages: Iterable[int] = THRESHOLD_PERCENTAGES,
    ) -> None:
        """Drop threshold flags so the next cycle can notify again."""
        keys = [threshold_key(tenant_id, metric, pct) for pct in percentages]
        if keys:
            await self._cache.delete(*keys)
