"""CRUD operations for BillingEvent model (append-only)."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.billing_event import BillingEvent


class CRUDBillingEvent(CRUDBase[BillingEvent]):
    """CRUD operations for BillingEvent model."""

    async def append(
        self,
        db: AsyncSession,
        *,
        tenant_id: UUID,
        event_type: str,
        metric_name: Optional[str],
        increment: int = 0,
        metadata: Optional[dict[str, Any]] = None,
        timestamp: Optional[datetime] = None,
    ) -> BillingEvent:
        """Append one event row."""
        values: dict[str, Any] = dict(
            tenant_id=tenant_id,
            event_type=event_type,
            metric_name=metric_name,
            increment=increment,
            event_metadata=metadata,
        )
        if timestamp is not None:
            values["timestamp"] = timestamp
        return await self.create(db, **values)

    async def exists_for_month(
        self,
        db: AsyncSession,
        *,
        tenant_id: UUID,
        event_type: str,
        metric_name: str,
        month: str,
    ) -> bool:
        """True when an event of *event_type* with ``metadata.month == month`` exists."""
        query = (
            select(self.model.id)
            .where(
                and_(
                    self.model.tenant_id == tenant_id,
                    self.model.event_type == event_type,
                    self.model.metric_name == metric_name,
                    self.model.event_metadata["month"].astext == month,
                )
            )
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none() is not None


billing_event = CRUDBillingEvent(BillingEvent)
