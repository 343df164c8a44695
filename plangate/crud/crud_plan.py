"""CRUD operations for Plan model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.plan import Plan


class CRUDPlan(CRUDBase[Plan]):
    """CRUD operations for Plan model."""

    async def get_active_manual_for_tenant(
        self, db: AsyncSession, *, tenant_id: UUID
    ) -> Optional[Plan]:
        """Get the tenant's active manual-invoicing plan, newest first."""
        query = (
            select(self.model)
            .where(
                and_(
                    self.model.tenant_id == tenant_id,
                    self.model.is_active.is_(True),
                    self.model.manual_invoicing.is_(True),
                )
            )
            .order_by(self.model.created_at.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_active_shared_by_price(
        self, db: AsyncSession, *, price_ref: str
    ) -> Optional[Plan]:
        """Get the active shared (tenant-less) plan linked to *price_ref*."""
        query = (
            select(self.model)
            .where(
                and_(
                    self.model.price_ref == price_ref,
                    self.model.is_active.is_(True),
                    self.model.tenant_id.is_(None),
                )
            )
            .order_by(self.model.created_at.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


plan = CRUDPlan(Plan)
