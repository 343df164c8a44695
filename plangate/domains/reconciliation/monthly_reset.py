"""Monthly usage reset.

Closes the previous calendar month: records a summary event per
(tenant, metric), then drops the closed period's counter and the
threshold flags so the new month starts clean. Safe to re-run for the
same month.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.datetime_utils import previous_calendar_month
from plangate.core.events import UsageEventType, UsageMonthlySummaryEvent
from plangate.core.protocols.event_bus import DomainEvent
from plangate.domains.plans.types import PlanLimits
from plangate.domains.reconciliation.base import ReconciliationJob
from plangate.domains.reconciliation.types import MONTHLY_RESET_JOB


class MonthlyUsageResetJob(ReconciliationJob):
    """Summarize the closed month and reset live counters."""

    job_name = MONTHLY_RESET_JOB

    async def _reconcile_metric(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        limits: Optional[PlanLimits],
        now: datetime,
    ) -> list[DomainEvent]:
        month, last_day = previous_calendar_month(now)
        limit = await self._limit_for(tenant_id, metric, limits)

        row = await self._ledger.get_snapshot(db, tenant_id, metric, last_day)
        if row is not None:
            usage = row.current_usage
        else:
            usage = await self._read_usage(tenant_id, metric, month)
            await self._ledger.upsert_snapshot(db, tenant_id, metric, last_day, usage, limit)

        already_summarized = await self._event_repo.exists_for_month(
            db, tenant_id, UsageEventType.MONTHLY_SUMMARY.value, metric, month
        )
        if already_summarized:
            self._log.with_context(tenant_id=str(tenant_id), metric=metric).info(
                f"Summary for {month} already recorded"
            )
            return []

        await self._event_repo.append(
            db,
            tenant_id,
            UsageEventType.MONTHLY_SUMMARY.value,
            metric,
            metadata={"month": month, "usage": usage, "limit": limit},
            timestamp=now,
        )
        return [
            UsageMonthlySummaryEvent(
                tenant_id=tenant_id, metric=metric, month=month, usage=usage, limit=limit
            )
        ]

    async def _after_commit(
        self, tenant_id: UUID, metric: str, events: list[DomainEvent], now: datetime
    ) -> None:
        month, _ = previous_calendar_month(now)
        for event in events:
            await self._event_bus.publish(event)
        await self._counter_store.clear_period(tenant_id, metric, month)
        await self._counter_store.clear_triggered(tenant_id, metric)
