"""Domain events emitted by the usage reconciliation jobs.

UsageThresholdCrossedEvent is emitted at most once per (tenant, metric,
threshold) per month by the daily snapshot job.

UsageMonthlySummaryEvent is emitted by the monthly reset job for every
metric a tenant recorded in the closed month.
"""

from datetime import date, datetime
from typing import Optional

from plangate.core.events.base import DomainEvent
from plangate.core.events.enums import UsageEventType


class UsageThresholdCrossedEvent(DomainEvent):
    """A tenant's monthly usage for a metric reached 80% or 100% of its limit."""

    event_type: UsageEventType = UsageEventType.THRESHOLD_CROSSED

    metric: str
    threshold: int
    usage: int
    limit: int
    percentage: float
    period_date: date
    month: str
    triggered_at: datetime


class UsageMonthlySummaryEvent(DomainEvent):
    """Rollup of a closed calendar month for one metric."""

    event_type: UsageEventType = UsageEventType.MONTHLY_SUMMARY

    metric: str
    month: str
    usage: int
    limit: Optional[int] = None
