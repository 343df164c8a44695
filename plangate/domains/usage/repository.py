"""Usage domain repositories wrapping crud.usage_ledger and crud.billing_event."""

from datetime import date, datetime
from typing import Any, Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate import crud
from plangate.models.billing_event import BillingEvent
from plangate.models.usage_ledger import UsageLedgerRow


class UsageLedgerRepositoryProtocol(Protocol):
    """Data access for daily ledger rows."""

    async def get_row(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        """Get one (tenant, metric, day) row."""
        ...

    async def upsert(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int],
    ) -> UsageLedgerRow:
        """Insert or update by the unique triple; a None limit keeps the stored one."""
        ...

    async def add_to_usage(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date, amount: int
    ) -> int:
        """Atomically add a signed amount to a day's row, floored at zero."""
        ...

    async def get_history(
        self, db: AsyncSession, tenant_id: UUID, since: date, until: date
    ) -> list[UsageLedgerRow]:
        """Rows between two days, ascending."""
        ...


class UsageEventRepositoryProtocol(Protocol):
    """Append-only usage event log."""

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
        """Append one event."""
        ...

    async def exists_for_month(
        self, db: AsyncSession, tenant_id: UUID, event_type: str, metric: str, month: str
    ) -> bool:
        """Whether an event of this type was already recorded for the month."""
        ...


class UsageLedgerRepository(UsageLedgerRepositoryProtocol):
    """Delegates to the crud.usage_ledger singleton."""

    async def get_row(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        """Get one (tenant, metric, day) row."""
        return await crud.usage_ledger.get_row(
            db, tenant_id=tenant_id, metric_name=metric, period_date=period_date
        )

    async def upsert(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        period_date: date,
        usage: int,
        limit: Optional[int],
    ) -> UsageLedgerRow:
        """Insert or update by the unique triple."""
        return await crud.usage_ledger.upsert(
            db,
            tenant_id=tenant_id,
            metric_name=metric,
            period_date=period_date,
            current_usage=usage,
            limit_value=limit,
        )

    async def add_to_usage(
        self, db: AsyncSession, tenant_id: UUID, metric: str, period_date: date, amount: int
    ) -> int:
        """Atomically add a signed amount to a day's row."""
        return await crud.usage_ledger.add_to_usage(
            db, tenant_id=tenant_id, metric_name=metric, period_date=period_date, amount=amount
        )

    async def get_history(
        self, db: AsyncSession, tenant_id: UUID, since: date, until: date
    ) -> list[UsageLedgerRow]:
        """Rows between two days, ascending."""
        return await crud.usage_ledger.get_history(
            db, tenant_id=tenant_id, since=since, until=until
        )


class UsageEventRepository(UsageEventRepositoryProtocol):
    """Delegates to the crud.billing_event singleton."""

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
        """Append one event."""
        return await crud.billing_event.append(
            db,
            tenant_id=tenant_id,
            event_type=event_type,
            metric_name=metric,
            increment=increment,
            metadata=metadata,
            timestamp=timestamp,
        )

    async def exists_for_month(
        self, db: AsyncSession, tenant_id: UUID, event_type: str, metric: str, month: str
    ) -> bool:
        """Whether an event of this type was already recorded for the month."""
        return await crud.billing_event.exists_for_month(
            db, tenant_id=tenant_id, event_type=event_type, metric_name=metric, month=month
        )
