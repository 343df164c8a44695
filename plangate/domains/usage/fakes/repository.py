"""Fake usage repositories for testing."""

from datetime import date, datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.models.billing_event import BillingEvent
from plangate.models.usage_ledger import UsageLedgerRow


class FakeUsageLedgerRepository:
    """In-memory fake for UsageLedgerRepositoryProtocol keyed by the unique triple."""

    def __init__(self, should_raise: Optional[Exception] = None) -> None:
        """Initialize empty in-memory store."""
        self.rows: dict[tuple[UUID, str, date], UsageLedgerRow] = {}
        self._should_raise = should_raise
        self._calls: list[tuple] = []

    def _record(self, *call: Any) -> None:
        self._calls.append(call)
        if self._should_raise:
            raise self._should_raise

    def seed(
        self,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int] = None,
    ) -> UsageLedgerRow:
        """Store a row directly."""
        row = UsageLedgerRow(
            id=uuid4(),
            tenant_id=tenant_id,
            metric_name=metric,
            period_date=period_date,
            current_usage=usage,
            limit_value=limit,
        )
        self.rows[(tenant_id, metric, period_date)] = row
        return row

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    async def get_row(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        self._record("get_row", tenant_id, metric, period_date)
        return self.rows.get((tenant_id, metric, period_date))

    async def upsert(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int],
    ) -> UsageLedgerRow:
        self._record("upsert", tenant_id, metric, period_date, usage, limit)
        row = self.rows.get((tenant_id, metric, period_date))
        if row is None:
            return self.seed(tenant_id, metric, period_date, usage, limit)
        row.current_usage = usage
        if limit is not None:
            row.limit_value = limit
        return row

    async def add_to_usage(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date, amount: int
    ) -> int:
        self._record("add_to_usage", tenant_id, metric, period_date, amount)
        row = self.rows.get((tenant_id, metric, period_date))
        if row is None:
            row = self.seed(tenant_id, metric, period_date, 0)
        row.current_usage = max(0, row.current_usage + amount)
        return row.current_usage

    async def get_history(
        self, db: AsyncSession, tenant_id: UUID, since: date, until: date
    ) -> list[UsageLedgerRow]:
        self._record("get_history", tenant_id, since, until)
        rows = [
            r
            for (t, _, d), r in self.rows.items()
            if t == tenant_id and since <= d <= until
        ]
        return sorted(rows, key=lambda r: (r.period_date, r.metric_name))


class FakeUsageEventRepository:
    """In-memory fake for UsageEventRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty event log."""
        self.events: list[BillingEvent] = []

    async def append(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        event_type: str,
        metric: Optional[str],
        increment: int = 0,
        metadata: Optional[dict[str, Any]] = None,
        timestamp: Optional[datetime] = None,
    ) -> BillingEvent:
        event = BillingEvent(
            id=uuid4(),
            tenant_id=tenant_id,
            event_type=event_type,
            metric_name=metric,
            increment=increment,
            event_metadata=metadata,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self.events.append(event)
        return event

    async def exists_for_month(
        self, db: AsyncSession, tenant_id: UUID, event_type: str, metric: str, month: str
    ) -> bool:
        return any(
            e.tenant_id == tenant_id
            and e.event_type == event_type
            and e.metric_name == metric
            and (e.event_metadata or {}).get("month") == month
            for e in self.events
        )

    def of_type(self, event_type: str) -> list[BillingEvent]:
        """Recorded events with the given type."""
        return [e for e in self.events if e.event_type == event_type]
