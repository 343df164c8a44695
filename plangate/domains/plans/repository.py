"""Plans domain repository wrapping crud.plan."""

from typing import Any, Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate import crud
from plangate.models.plan import Plan


class PlanRepositoryProtocol(Protocol):
    """Data access for plan rows."""

    async def get(self, db: AsyncSession, plan_id: UUID) -> Optional[Plan]:
        """Get a plan by id."""
        ...

    async def get_active_manual_for_tenant(
        self, db: AsyncSession, tenant_id: UUID
    ) -> Optional[Plan]:
        """The tenant's active manual-invoicing plan, if any."""
        ...

    async def get_active_shared_by_price(self, db: AsyncSession, price_ref: str) -> Optional[Plan]:
        """The active shared plan linked to *price_ref*, if any."""
        ...

    async def create(self, db: AsyncSession, **values: Any) -> Plan:
        """Insert a plan row."""
        ...

    async def save(self, db: AsyncSession, plan: Plan) -> Plan:
        """Stage changes to a plan row."""
        ...


class PlanRepository(PlanRepositoryProtocol):
    """Delegates to the crud.plan singleton."""

    async def get(self, db: AsyncSession, plan_id: UUID) -> Optional[Plan]:
        """Get a plan by id."""
        return await crud.plan.get(db, plan_id)

    async def get_active_manual_for_tenant(
        self, db: AsyncSession, tenant_id: UUID
    ) -> Optional[Plan]:
        """The tenant's active manual-invoicing plan, if any."""
        return await crud.plan.get_active_manual_for_tenant(db, tenant_id=tenant_id)

    async def get_active_shared_by_price(self, db: AsyncSession, price_ref: str) -> Optional[Plan]:
        """The active shared plan linked to *price_ref*, if any."""
        return await crud.plan.get_active_shared_by_price(db, price_ref=price_ref)

    async def create(self, db: AsyncSession, **values: Any) -> Plan:
        """Insert a plan row."""
        return await crud.plan.create(db, **values)

    async def save(self, db: AsyncSession, plan: Plan) -> Plan:
        """Stage changes to a plan row."""
        return await crud.plan.save(db, plan)
