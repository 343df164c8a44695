"""CRUD operations for Subscription model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.subscription import Subscription


class CRUDSubscription(CRUDBase[Subscription]):
    """CRUD operations for Subscription model."""

    async def get_by_tenant(self, db: AsyncSession, *, tenant_id: UUID) -> Optional[Subscription]:
        """Get the subscription row for a tenant."""
        result = await db.execute(select(self.model).where(self.model.tenant_id == tenant_id))
        return result.scalar_one_or_none()

    async def get_by_subscription_ref(
        self, db: AsyncSession, *, subscription_ref: str
    ) -> Optional[Subscription]:
        """Get the subscription row by provider subscription id."""
        result = await db.execute(
            select(self.model).where(self.model.subscription_ref == subscription_ref)
        )
        return result.scalars().first()

    async def get_by_customer_ref(
        self, db: AsyncSession, *, customer_ref: str
    ) -> Optional[Subscription]:
        """Get the subscription row by provider customer id."""
        result = await db.execute(
            select(self.model).where(self.model.customer_ref == customer_ref)
        )
        return result.scalars().first()


subscription = CRUDSubscription(Subscription)
