"""Plan limit resolver.

Precedence, first match wins:

1. an active manual-invoicing plan scoped to the tenant;
2. the tenant's subscription plan (``free`` when there is no row), mapped
   to a provider price through ``PlanPriceConfig``, then to the active
   shared plan row carrying that price.

When step 2 finds no mapping or no row the limits are unresolved and the
resolver returns None. Callers treat that as unlimited.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.exceptions import ConfigurationGapError
from plangate.core.logging import logger
from plangate.domains.billing.repository import SubscriptionRepositoryProtocol
from plangate.domains.plans.exceptions import InvalidPlanLimitsError
from plangate.domains.plans.protocols import PlanLimitResolverProtocol
from plangate.domains.plans.repository import PlanRepositoryProtocol
from plangate.domains.plans.types import (
    PlanLimits,
    PlanPriceConfig,
    assert_valid_plan_limits,
    limit_for,
)
from plangate.domains.usage.protocols import UsageCounterStoreProtocol
from plangate.models.plan import Plan
from plangate.schemas.billing import BillingPlan


class PlanLimitResolver(PlanLimitResolverProtocol):
    """Resolve a tenant's effective PlanLimits."""

    def __init__(
        self,
        plan_repo: PlanRepositoryProtocol,
        subscription_repo: SubscriptionRepositoryProtocol,
        counter_store: UsageCounterStoreProtocol,
        price_config: PlanPriceConfig,
    ) -> None:
        """Initialize with repositories, the counter store and the price mapping."""
        self._plan_repo = plan_repo
        self._subscription_repo = subscription_repo
        self._counter_store = counter_store
        self._price_config = price_config

    async def current_plan(self, db: AsyncSession, tenant_id: UUID) -> BillingPlan:
        """Subscription plan identifier; free when no row or unknown value."""
        subscription = await self._subscription_repo.get_by_tenant(db, tenant_id)
        if subscription is None:
            return BillingPlan.FREE
        try:
            return BillingPlan(subscription.plan)
        except ValueError:
            logger.with_context(tenant_id=str(tenant_id)).warning(
                f"Unknown subscription plan '{subscription.plan}', treating as free"
            )
            return BillingPlan.FREE

    async def resolve_plan(self, db: AsyncSession, tenant_id: UUID) -> Optional[Plan]:
        """The plan row that supplies the tenant's limits, if any."""
        manual = await self._plan_repo.get_active_manual_for_tenant(db, tenant_id)
        if manual is not None:
            return manual

        plan = await self.current_plan(db, tenant_id)
        log = logger.with_context(tenant_id=str(tenant_id), plan=plan.value)

        price_ref = self._price_config.price_for(plan)
        if not price_ref:
            log.warning(str(ConfigurationGapError(f"No price configured for plan '{plan.value}'")))
            return None

        row = await self._plan_repo.get_active_shared_by_price(db, price_ref)
        if row is None:
            log.warning(
                str(ConfigurationGapError(f"No active shared plan for price '{price_ref}'"))
            )
            return None
        return row

    async def resolve(self, db: AsyncSession, tenant_id: UUID) -> Optional[PlanLimits]:
        """Effective limits for the tenant, or None when unresolved."""
        plan = await self.resolve_plan(db, tenant_id)
        if plan is None:
            return None
        limits = dict(plan.limits or {})
        try:
            assert_valid_plan_limits(limits)
        except InvalidPlanLimitsError as e:
            logger.with_context(tenant_id=str(tenant_id), plan_id=str(plan.id)).error(
                f"Stored plan limits are invalid, ignoring plan: {e}"
            )
            return None
        return {k: v for k, v in limits.items() if v is not None}

    async def remaining_capacity(
        self, db: AsyncSession, tenant_id: UUID, metric: str
    ) -> Optional[int]:
        """Units still available this period, or None when unlimited."""
        limit = limit_for(await self.resolve(db, tenant_id), metric)
        if limit is None:
            return None
        usage = await self._counter_store.read(tenant_id, metric)
        return max(0, int(limit) - usage)
