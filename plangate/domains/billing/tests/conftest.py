"""Billing domain test fixtures and helpers.

Provides pre-built helpers for ORM models, processor wiring and Stripe
event shapes.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from plangate.adapters.audit.fake import FakeAuditLog
from plangate.adapters.event_bus.fake import FakeEventBus
from plangate.adapters.metrics.billing import FakeBillingMetrics
from plangate.adapters.payment.fake import FakePaymentGateway, _obj
from plangate.domains.billing.fakes.repository import (
    FakeProcessedEventRepository,
    FakeSubscriptionRepository,
)
from plangate.domains.billing.webhook_processor import BillingWebhookProcessor
from plangate.models.subscription import Subscription
from plangate.schemas.billing import BillingPlan, SubscriptionStatus

# Default test IDs
DEFAULT_TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")

FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_subscription_model(
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


def _make_webhook_processor(
    *,
    payment_gateway: Optional[FakePaymentGateway] = None,
    subscription_repo: Optional[FakeSubscriptionRepository] = None,
    processed_repo: Optional[FakeProcessedEventRepository] = None,
) -> tuple[
    BillingWebhookProcessor,
    FakePaymentGateway,
    FakeSubscriptionRepository,
    FakeProcessedEventRepository,
    FakeEventBus,
    FakeAuditLog,
    FakeBillingMetrics,
]:
    """Build a BillingWebhookProcessor wired to fakes. Returns (processor, *fakes)."""
    gw = payment_gateway or FakePaymentGateway()
    subs = subscription_repo or FakeSubscriptionRepository()
    processed = processed_repo or FakeProcessedEventRepository()
    bus = FakeEventBus()
    audit = FakeAuditLog()
    metrics = FakeBillingMetrics()
    proc = BillingWebhookProcessor(
        payment_gateway=gw,
        subscription_repo=subs,
        processed_repo=processed,
        event_bus=bus,
        audit_log=audit,
        metrics=metrics,
        clock=lambda: FIXED_NOW,
    )
    return proc, gw, subs, processed, bus, audit, metrics


def _transactional_db(processed: FakeProcessedEventRepository) -> AsyncMock:
    """AsyncMock session whose commit/rollback settle the fake's marker claims."""
    db = AsyncMock()
    db.commit.side_effect = lambda: processed.commit(db)
    db.rollback.side_effect = lambda: processed.rollback(db)
    return db


def _make_stripe_event(
    event_type: str,
    data_object: Any,
    event_id: str = "evt_test",
) -> _obj:
    """Build a minimal Stripe event attribute-bag."""
    return _obj(type=event_type, id=event_id, data=_obj(object=data_object))


def _make_checkout_session(
    tenant_id: UUID = DEFAULT_TENANT_ID,
    plan: str = "starter",
    **overrides: Any,
) -> _obj:
    """Build a fake Stripe checkout session attribute-bag."""
    defaults = dict(
        id="cs_test",
        customer="cus_test",
        subscription="sub_test",
        payment_intent="pi_test",
        metadata={"tenant_id": str(tenant_id), "plan_id": plan, "user_id": "user_1"},
    )
    defaults.update(overrides)
    return _obj(**defaults)


def _make_invoice_obj(**overrides: Any) -> _obj:
    """Build a fake Stripe invoice attribute-bag."""
    defaults = dict(
        id="in_test",
        customer="cus_test",
        subscription="sub_test",
        payment_intent="pi_invoice",
    )
    defaults.update(overrides)
    return _obj(**defaults)


def _make_subscription_obj(**overrides: Any) -> _obj:
    """Build a fake Stripe subscription attribute-bag."""
    defaults = dict(id="sub_test", customer="cus_test", status="canceled", ended_at=None)
    defaults.update(overrides)
    return _obj(**defaults)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    """AsyncMock database session; fakes ignore it."""
    return AsyncMock()
