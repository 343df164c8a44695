"""Fake plan limit resolver for testing."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.domains.plans.types import PlanLimits, limit_for
from plangate.models.plan import Plan
from plangate.schemas.billing import BillingPlan


class FakePlanLimitResolver:
    """In-memory fake for PlanLimitResolverProtocol.

    Limits are seeded per tenant; unseeded tenants resolve to None.
    """

    def __init__(self, should_raise: Optional[Exception] = None) -> None:
        """Initialize with optional error injection."""
        self._limits: dict[UUID, Optional[PlanLimits]] = {}
        self._plans: dict[UUID, BillingPlan] = {}
        self._usage: dict[tuple[UUID, str], int] = {}
        self._should_raise = should_raise
        self.resolve_calls = 0

    def seed(
        self,
        tenant_id: UUID,
        limits: Optional[PlanLimits],
        plan: BillingPlan = BillingPlan.FREE,
    ) -> None:
        """Set the limits (and plan identifier) returned for a tenant."""
        self._limits[tenant_id] = limits
        self._plans[tenant_id] = plan

    def seed_usage(self, tenant_id: UUID, metric: str, usage: int) -> None:
        """Usage used by remaining_capacity."""
        self._usage[(tenant_id, metric)] = usage

    async def resolve(self, db: AsyncSession, tenant_id: UUID) -> Optional[PlanLimits]:
        self.resolve_calls += 1
        if self._should_raise:
            raise self._should_raise
        return self._limits.get(tenant_id)

    async def resolve_plan(self, db: AsyncSession, tenant_id: UUID) -> Optional[Plan]:
        limits = await self.resolve(db, tenant_id)
        if limits is None:
            return None
        return Plan(name="fake", limits=limits, is_active=True, manual_invoicing=False)

    async def current_plan(self, db: AsyncSession, tenant_id: UUID) -> BillingPlan:
        return self._plans.get(tenant_id, BillingPlan.FREE)

    async def remaining_capacity(
        self, db: AsyncSession, tenant_id: UUID, metric: str
    ) -> Optional[int]:
        limit = limit_for(await self.resolve(db, tenant_id), metric)
        if limit is None:
            return None
        return max(0, int(limit) - self._usage.get((tenant_id, metric), 0))
