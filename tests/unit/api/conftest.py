"""API test fixtures: a container of fakes behind the real FastAPI app."""

from dataclasses import dataclass
from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from plangate.adapters.audit.fake import FakeAuditLog
from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.adapters.event_bus.fake import FakeEventBus
from plangate.adapters.metrics.billing import FakeBillingMetrics
from plangate.adapters.payment.fake import FakePaymentGateway
from plangate.api import deps
from plangate.core.config import Environment, Settings
from plangate.core.container import create_container, reset_container, set_container
from plangate.domains.billing.fakes.repository import (
    FakeProcessedEventRepository,
    FakeSubscriptionRepository,
)
from plangate.domains.billing.webhook_processor import BillingWebhookProcessor
from plangate.domains.plans.fakes.repository import FakePlanRepository
from plangate.domains.plans.fakes.resolver import FakePlanLimitResolver
from plangate.domains.plans.service import PlanService
from plangate.domains.usage.counter_store import UsageCounterStore
from plangate.domains.usage.fakes.repository import (
    FakeUsageEventRepository,
    FakeUsageLedgerRepository,
)
from plangate.domains.usage.ledger import UsageLedger
from plangate.domains.usage.limit_gate import CacheLimitGuard, LimitEnforcementGate
from plangate.main import create_app

TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")


@dataclass
class ApiHarness:
    client: TestClient
    db: AsyncMock
    cache: FakeCacheBackend
    store: UsageCounterStore
    resolver: FakePlanLimitResolver
    ledger_repo: FakeUsageLedgerRepository
    plan_repo: FakePlanRepository
    subscription_repo: FakeSubscriptionRepository
    event_bus: FakeEventBus
    metrics: FakeBillingMetrics

    def install(self, **changes) -> None:
        """Swap further container fields for this test."""
        from plangate.core import container as container_mod

        set_container(container_mod.container.replace(**changes))


@pytest.fixture
def api():
    """The real app wired to in-memory fakes; the DB session is an AsyncMock."""
    cache = FakeCacheBackend()
    store = UsageCounterStore(cache, counter_ttl_seconds=3600, threshold_ttl_seconds=3600)
    resolver = FakePlanLimitResolver()
    metrics = FakeBillingMetrics()
    ledger_repo = FakeUsageLedgerRepository()
    ledger = UsageLedger(ledger_repo, FakeUsageEventRepository(), resolver)
    plan_repo = FakePlanRepository()
    subscription_repo = FakeSubscriptionRepository()
    event_bus = FakeEventBus()
    webhook = BillingWebhookProcessor(
        payment_gateway=FakePaymentGateway(),
        subscription_repo=subscription_repo,
        processed_repo=FakeProcessedEventRepository(),
        event_bus=event_bus,
        audit_log=FakeAuditLog(),
        metrics=metrics,
    )

    base = create_container(Settings(ENVIRONMENT=Environment.TEST))
    set_container(
        base.replace(
            event_bus=event_bus,
            cache=cache,
            metrics=metrics,
            counter_store=store,
            plan_resolver=resolver,
            plan_service=PlanService(plan_repo),
            limit_gate=LimitEnforcementGate(resolver, store, metrics),
            cache_limit_guard=CacheLimitGuard(store),
            usage_ledger=ledger,
            billing_webhook=webhook,
        )
    )

    db = AsyncMock()

    async def _override_db():
        yield db

    app = create_app()
    app.dependency_overrides[deps.get_db] = _override_db

    yield ApiHarness(
        client=TestClient(app),
        db=db,
        cache=cache,
        store=store,
        resolver=resolver,
        ledger_repo=ledger_repo,
        plan_repo=plan_repo,
        subscription_repo=subscription_repo,
        event_bus=event_bus,
        metrics=metrics,
    )
    reset_container()
