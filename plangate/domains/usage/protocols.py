"""Usage domain protocols.

UsageCounterStore: live cache counters, registry and threshold flags.
LimitEnforcementGate: request-path admit/reject decision.
UsageLedger: durable per-day usage rows and the usage summary.
"""

from datetime import date
from typing import Iterable, Optional, Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.domains.usage.types import EnforceOptions, LimitCheckResult
from plangate.models.usage_ledger import UsageLedgerRow
from plangate.schemas.usage import UsageSummary


@runtime_checkable
class UsageCounterStoreProtocol(Protocol):
    """Cache-backed live usage counters."""

    def current_period(self) -> str:
        """Label (``YYYY-MM``) of the current period."""
        ...

    async def increment(self, tenant_id: UUID, metric: str, amount: int = 1) -> int:
        """Atomically add to the current-period counter; returns the new value."""
        ...

    async def decrement(self, tenant_id: UUID, metric: str, amount: int = 1) -> int:
        """Atomically subtract, clamping at zero; returns the new value."""
        ...

    async def delta(self, tenant_id: UUID, metric: str, amount: int) -> int:
        """Apply a signed change; zero is a pure read."""
        ...

    async def read(self, tenant_id: UUID, metric: str, period: Optional[str] = None) -> int:
        """Counter value; 0 when absent."""
        ...

    async def clear_period(self, tenant_id: UUID, metric: str, period: str) -> None:
        """Delete the counter of a closed period."""
        ...

    async def list_metrics(self, tenant_id: UUID) -> set[str]:
        """Registered metric names for a tenant."""
        ...

    async def set_limit(self, tenant_id: UUID, metric: str, limit: Optional[int]) -> None:
        """Set or remove the cache-level limit override."""
        ...

    async def get_limit(self, tenant_id: UUID, metric: str) -> Optional[int]:
        """Cache-level limit override, if any."""
        ...

    async def mark_triggered(self, tenant_id: UUID, metric: str, pct: int) -> None:
        """Set the threshold flag."""
        ...

    async def is_triggered(self, tenant_id: UUID, metric: str, pct: int) -> bool:
        """Whether the threshold flag is set."""
        ...

    async def clear_triggered(
        self, tenant_id: UUID, metric: str, percentages: Iterable[int] = ...
    ) -> None:
        """Clear threshold flags."""
        ...


@runtime_checkable
class LimitEnforcementGateProtocol(Protocol):
    """Request-path admission control against plan limits."""

    async def enforce(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        requested: int,
        options: EnforceOptions = ...,
    ) -> None:
        """Return if admitted; raise LimitExceededError otherwise."""
        ...

    async def can_perform_action(
        self, db: AsyncSession, tenant_id: UUID, action: str, count: int = 1
    ) -> LimitCheckResult:
        """Structured allow/deny answer that never raises for over-limit."""
        ...


@runtime_checkable
class UsageLedgerProtocol(Protocol):
    """Durable per-day usage rows. Callers own the transaction."""

    async def upsert_snapshot(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int],
    ) -> None:
        """Insert or update the (tenant, metric, day) row."""
        ...

    async def get_snapshot(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        """The stored row for a day, if any."""
        ...

    async def increment(
        self, db: AsyncSession, tenant_id: UUID, metric: str, amount: int = 1
    ) -> int:
        """Add to today's row and append a delta event."""
        ...

    async def decrement(
        self, db: AsyncSession, tenant_id: UUID, metric: str, amount: int = 1
    ) -> int:
        """Subtract from today's row (floored at 0) and append a delta event."""
        ...

    async def get_usage(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: Optional[date] = None,
    ) -> int:
        """Stored usage for a day (default today); 0 when no row."""
        ...

    async def get_usage_summary(
        self, db: AsyncSession, tenant_id: UUID, days: int = 7
    ) -> UsageSummary:
        """Plan plus per-metric usage and daily history."""
        ...
