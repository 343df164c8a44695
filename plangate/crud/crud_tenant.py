"""CRUD operations for Tenant model."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.tenant import Tenant
from plangate.schemas.tenant import TenantStatus


class CRUDTenant(CRUDBase[Tenant]):
    """CRUD operations for Tenant model."""

    async def list_active_ids(self, db: AsyncSession) -> list[UUID]:
        """Return ids of all tenants with status ``active``, oldest first."""
        query = (
            select(self.model.id)
            .where(self.model.status == TenantStatus.ACTIVE.value)
            .order_by(self.model.created_at)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


tenant = CRUDTenant(Tenant)
