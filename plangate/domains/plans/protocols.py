"""Plans domain protocols."""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.domains.plans.types import PlanLimits
from plangate.models.plan import Plan
from plangate.schemas.billing import BillingPlan
from plangate.schemas.plan import PlanCreate, PlanUpdate


@runtime_checkable
class PlanLimitResolverProtocol(Protocol):
    """Determines the effective plan limits for a tenant."""

    async def resolve(self, db: AsyncSession, tenant_id: UUID) -> Optional[PlanLimits]:
        """Effective limits, or None when they can't be determined."""
        ...

    async def resolve_plan(self, db: AsyncSession, tenant_id: UUID) -> Optional[Plan]:
        """The plan row the limits come from."""
        ...

    async def current_plan(self, db: AsyncSession, tenant_id: UUID) -> BillingPlan:
        """Subscription plan identifier (free when no subscription row)."""
        ...

    async def remaining_capacity(
        self, db: AsyncSession, tenant_id: UUID, metric: str
    ) -> Optional[int]:
        """``max(0, limit - usage)``, or None when unlimited."""
        ...


@runtime_checkable
class PlanServiceProtocol(Protocol):
    """Plan maintenance with limit and scope validation."""

    async def create_plan(self, db: AsyncSession, plan_in: PlanCreate) -> Plan:
        """Validate and insert a plan."""
        ...

    async def update_plan(self, db: AsyncSession, plan_id: UUID, plan_in: PlanUpdate) -> Plan:
        """Validate and apply a partial update."""
        ...
