"""Durable usage ledger: one row per (tenant, metric, day).

Written by the reconciliation jobs (cache snapshots) and by direct
tenant-originated usage writes. Direct writes also append a ``usage.delta``
event. Nothing here commits; the caller owns the transaction.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.datetime_utils import utc_now
from plangate.core.events.enums import UsageEventType
from plangate.core.logging import logger
from plangate.domains.plans.protocols import PlanLimitResolverProtocol
from plangate.domains.plans.types import limit_for
from plangate.domains.usage.protocols import UsageLedgerProtocol
from plangate.domains.usage.repository import (
    UsageEventRepositoryProtocol,
    UsageLedgerRepositoryProtocol,
)
from plangate.domains.usage.types import usage_percentage
from plangate.models.usage_ledger import UsageLedgerRow
from plangate.schemas.usage import UsageHistoryPoint, UsageMetricSummary, UsageSummary


class UsageLedger(UsageLedgerProtocol):
    """Daily usage rows plus the tenant-facing usage summary."""

    def __init__(
        self,
        ledger_repo: UsageLedgerRepositoryProtocol,
        event_repo: UsageEventRepositoryProtocol,
        resolver: PlanLimitResolverProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize with repositories, the plan resolver and a clock."""
        self._ledger_repo = ledger_repo
        self._event_repo = event_repo
        self._resolver = resolver
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    async def upsert_snapshot(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int],
    ) -> None:
        """Insert or update the (tenant, metric, day) row; None never clears a limit."""
        await self._ledger_repo.upsert(db, tenant_id, metric, period_date, max(0, usage), limit)

    async def get_snapshot(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        """The stored row for a day, if any."""
        return await self._ledger_repo.get_row(db, tenant_id, metric, period_date)

    async def increment(
        self, db: AsyncSession, tenant_id: UUID, metric: str, amount: int = 1
    ) -> int:
        """Add *amount* to today's row; ``amount <= 0`` is a read."""
        if amount <= 0:
            return await self.get_usage(db, tenant_id, metric)
        return await self._apply(db, tenant_id, metric, amount)

    async def decrement(
        self, db: AsyncSession, tenant_id: UUID, metric: str, amount: int = 1
    ) -> int:
        """Subtract *amount* from today's row, floored at zero."""
        if amount <= 0:
            return await self.get_usage(db, tenant_id, metric)
        return await self._apply(db, tenant_id, metric, -amount)

    async def _apply(self, db: AsyncSession, tenant_id: UUID, metric: str, amount: int) -> int:
        today = self._today()
        value = await self._ledger_repo.add_to_usage(db, tenant_id, metric, today, amount)
        await self._event_repo.append(
            db,
            tenant_id,
            UsageEventType.DELTA.value,
            metric,
            increment=amount,
            metadata={"period_date": today.isoformat(), "value": value},
        )
        logger.with_context(tenant_id=str(tenant_id), metric=metric).debug(
            f"Ledger usage changed by {amount} to {value}"
        )
        return value

    async def get_usage(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: Optional[date] = None,
    ) -> int:
        """Stored usage for *period_date* (default today); 0 without a row."""
        row = await self._ledger_repo.get_row(
            db, tenant_id, metric, period_date or self._today()
        )
        return row.current_usage if row is not None else 0

    async def get_usage_summary(
        self, db: AsyncSession, tenant_id: UUID, days: int = 7
    ) -> UsageSummary:
        """Plan, per-metric usage today, limit, percentage and *days* of history."""
        today = self._today()
        since = today - timedelta(days=max(1, days) - 1)
        rows = await self._ledger_repo.get_history(db, tenant_id, since, today)

        plan = await self._resolver.current_plan(db, tenant_id)
        limits = await self._resolver.resolve(db, tenant_id)

        history: dict[str, list[UsageHistoryPoint]] = defaultdict(list)
        current: dict[str, int] = {}
        for row in rows:
            history[row.metric_name].append(
                UsageHistoryPoint(period_date=row.period_date, usage=row.current_usage)
            )
            if row.period_date == today:
                current[row.metric_name] = row.current_usage

        metrics = []
        for metric in sorted(history):
            usage = current.get(metric, 0)
            limit = limit_for(limits, metric)
            percentage = None
            if limit is not None and limit > 0:
                percentage = min(usage_percentage(usage, limit), 100.0)
            metrics.append(
                UsageMetricSummary(
                    metric=metric,
                    current_usage=usage,
                    limit=int(limit) if limit is not None else None,
                    percentage_used=percentage,
                    history=sorted(history[metric], key=lambda p: p.period_date),
                )
            )
        return UsageSummary(plan=plan, metrics=metrics)
