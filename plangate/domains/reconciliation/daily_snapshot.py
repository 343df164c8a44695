"""Daily usage snapshot.

Copies each tenant's live monthly counters into today's ledger row and
raises the one-shot 80% / 100% threshold notifications.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.datetime_utils import month_label
from plangate.core.events import UsageEventType, UsageThresholdCrossedEvent
from plangate.core.protocols.event_bus import DomainEvent
from plangate.domains.plans.types import PlanLimits
from plangate.domains.reconciliation.base import ReconciliationJob
from plangate.domains.reconciliation.types import DAILY_SNAPSHOT_JOB
from plangate.domains.usage.types import crossed_thresholds, usage_percentage


class DailyUsageSnapshotJob(ReconciliationJob):
    """Persist today's usage per (tenant, metric) and notify on thresholds."""

    job_name = DAILY_SNAPSHOT_JOB

    async def _reconcile_metric(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        limits: Optional[PlanLimits],
        now: datetime,
    ) -> list[DomainEvent]:
        month = month_label(now)
        period_date = now.date()
        usage = await self._read_usage(tenant_id, metric, month)
        limit = await self._limit_for(tenant_id, metric, limits)

        await self._ledger.upsert_snapshot(db, tenant_id, metric, period_date, usage, limit)

        if limit is None or limit <= 0:
            return []

        percentage = round(usage_percentage(usage, limit), 2)
        events: list[DomainEvent] = []
        for threshold in crossed_thresholds(usage, limit):
            if await self._counter_store.is_triggered(tenant_id, metric, threshold):
                continue
            await self._event_repo.append(
                db,
                tenant_id,
                UsageEventType.THRESHOLD_CROSSED.value,
                metric,
                metadata={
                    "threshold": threshold,
                    "usage": usage,
                    "limit": limit,
                    "percentage": percentage,
                    "month": month,
                },
                timestamp=now,
            )
            events.append(
                UsageThresholdCrossedEvent(
                    tenant_id=tenant_id,
                    metric=metric,
                    threshold=threshold,
                    usage=usage,
                    limit=limit,
                    percentage=percentage,
                    period_date=period_date,
                    month=month,
                    triggered_at=now,
                )
            )
        return events

    async def _after_commit(
        self, tenant_id: UUID, metric: str, events: list[DomainEvent], now: datetime
    ) -> None:
        # Flag before publish; a failed publish is not re-sent.
        for event in events:
            await self._counter_store.mark_triggered(tenant_id, metric, event.threshold)
            await self._event_bus.publish(event)
