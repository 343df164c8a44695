"""CRUD operations for UsageLedgerRow model."""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.usage_ledger import UsageLedgerRow


class CRUDUsageLedger(CRUDBase[UsageLedgerRow]):
    """CRUD operations for UsageLedgerRow model."""

    async def get_row(
        self, db: AsyncSession, *, tenant_id: UUID, metric_name: str, period_date: date
    ) -> Optional[UsageLedgerRow]:
        """Get the row for one (tenant, metric, day)."""
        query = select(self.model).where(
            and_(
                self.model.tenant_id == tenant_id,
                self.model.metric_name == metric_name,
                self.model.period_date == period_date,
            )
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        db: AsyncSession,
        *,
        tenant_id: UUID,
        metric_name: str,
        period_date: date,
        current_usage: int,
        limit_value: Optional[int],
    ) -> UsageLedgerRow:
        """Insert or update the (tenant, metric, day) row.

        ``limit_value=None`` leaves a stored limit untouched.
        """
        stmt = insert(self.model).values(
            tenant_id=tenant_id,
            metric_name=metric_name,
            period_date=period_date,
            current_usage=current_usage,
            limit_value=limit_value,
        )
        set_: dict = {
            "current_usage": stmt.excluded.current_usage,
            "modified_at": func.now(),
        }
        if limit_value is not None:
            set_["limit_value"] = stmt.excluded.limit_value
        stmt = stmt.on_conflict_do_update(
            index_elements=["tenant_id", "metric_name", "period_date"],
            set_=set_,
        ).returning(self.model)
        result = await db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    async def add_to_usage(
        self,
        db: AsyncSession,
        *,
        tenant_id: UUID,
        metric_name: str,
        period_date: date,
        amount: int,
    ) -> int:
        """Atomically add *amount* (may be negative) to a day's row, floored at 0.

        Creates the row when it doesn't exist. Returns the new value.
        """
        initial = max(0, amount)
        stmt = insert(self.model).values(
            tenant_id=tenant_id,
            metric_name=metric_name,
            period_date=period_date,
            current_usage=initial,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["tenant_id", "metric_name", "period_date"],
            set_={
                "current_usage": func.greatest(self.model.current_usage + amount, 0),
                "modified_at": func.now(),
            },
        ).returning(self.model.current_usage)
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def get_history(
        self,
        db: AsyncSession,
        *,
        tenant_id: UUID,
        since: date,
        until: date,
    ) -> list[UsageLedgerRow]:
        """Rows for a tenant between two days (inclusive), ascending by day."""
        query = (
            select(self.model)
            .where(
                and_(
                    self.model.tenant_id == tenant_id,
                    self.model.period_date >= since,
                    self.model.period_date <= until,
                )
            )
            .order_by(self.model.period_date.asc(), self.model.metric_name.asc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())


usage_ledger = CRUDUsageLedger(UsageLedgerRow)
