"""Plans domain test fixtures and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.domains.billing.fakes.repository import FakeSubscriptionRepository
from plangate.domains.plans.fakes.repository import FakePlanRepository
from plangate.domains.plans.resolver import PlanLimitResolver
from plangate.domains.plans.service import PlanService
from plangate.domains.plans.types import PlanPriceConfig
from plangate.domains.usage.counter_store import UsageCounterStore
from plangate.models.plan import Plan
from plangate.models.subscription import Subscription
from plangate.schemas.billing import BillingPlan, SubscriptionStatus

DEFAULT_TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_TENANT_ID = UUID("00000000-0000-0000-0000-000000000002")

PRICES = PlanPriceConfig(
    free="price_free",
    starter="price_starter",
    growth="price_growth",
    enterprise=None,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_plan(age_minutes: int = 0, **overrides: Any) -> Plan:
    """Return a Plan ORM model; larger *age_minutes* means an older row."""
    created = datetime.now(timezone.utc) - timedelta(minutes=age_minutes)
    defaults = dict(
        id=uuid4(),
        created_at=created,
        modified_at=created,
        name="Starter",
        price_ref="price_starter",
        product_ref="prod_starter",
        interval="month",
        limits={"api_calls": 1000},
        tenant_id=None,
        is_active=True,
        manual_invoicing=False,
        plan_metadata=None,
    )
    defaults.update(overrides)
    return Plan(**defaults)


def _make_subscription(
    tenant_id: UUID = DEFAULT_TENANT_ID, **overrides: Any
) -> Subscription:
    """Return a Subscription ORM model with sensible defaults."""
    now = datetime.now(timezone.utc)
    defaults = dict(
        id=uuid4(),
        created_at=now,
        modified_at=now,
        tenant_id=tenant_id,
        plan=BillingPlan.STARTER.value,
        status=SubscriptionStatus.ACTIVE.value,
        customer_ref="cus_test",
        subscription_ref="sub_test",
        transaction_ref=None,
        cancellation_effective_at=None,
    )
    defaults.update(overrides)
    return Subscription(**defaults)


def _make_resolver(
    *,
    prices: PlanPriceConfig = PRICES,
    cache: Optional[FakeCacheBackend] = None,
) -> tuple[
    PlanLimitResolver,
    FakePlanRepository,
    FakeSubscriptionRepository,
    UsageCounterStore,
    FakeCacheBackend,
]:
    """Build a PlanLimitResolver wired to fakes. Returns (resolver, *fakes)."""
    plans = FakePlanRepository()
    subs = FakeSubscriptionRepository()
    cache = cache or FakeCacheBackend()
    store = UsageCounterStore(
        cache,
        counter_ttl_seconds=3600,
        threshold_ttl_seconds=3600,
        clock=lambda: datetime(2024, 3, 15, tzinfo=timezone.utc),
    )
    resolver = PlanLimitResolver(
        plan_repo=plans,
        subscription_repo=subs,
        counter_store=store,
        price_config=prices,
    )
    return resolver, plans, subs, store, cache


def _make_service() -> tuple[PlanService, FakePlanRepository]:
    """Build a PlanService over a fake repository."""
    plans = FakePlanRepository()
    return PlanService(plan_repo=plans), plans


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    """AsyncMock database session; fakes ignore it."""
    return AsyncMock()
