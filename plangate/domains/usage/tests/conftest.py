"""Usage domain test fixtures and helpers.

Follows the pattern from domains/billing/tests/.
"""

from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.adapters.metrics.billing import FakeBillingMetrics
from plangate.domains.plans.fakes.resolver import FakePlanLimitResolver
from plangate.domains.plans.types import PlanLimits
from plangate.domains.usage.counter_store import UsageCounterStore
from plangate.domains.usage.fakes.repository import (
    FakeUsageEventRepository,
    FakeUsageLedgerRepository,
)
from plangate.domains.usage.ledger import UsageLedger
from plangate.domains.usage.limit_gate import LimitEnforcementGate

DEFAULT_TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_TENANT_ID = UUID("00000000-0000-0000-0000-000000000002")

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
COUNTER_TTL = 60 * 24 * 60 * 60
THRESHOLD_TTL = 60 * 24 * 60 * 60


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_counter_store(
    *,
    cache: Optional[FakeCacheBackend] = None,
    now: datetime = NOW,
) -> tuple[UsageCounterStore, FakeCacheBackend]:
    """Build a UsageCounterStore over a fake cache. Returns (store, cache)."""
    cache = cache or FakeCacheBackend()
    store = UsageCounterStore(
        cache,
        counter_ttl_seconds=COUNTER_TTL,
        threshold_ttl_seconds=THRESHOLD_TTL,
        clock=lambda: now,
    )
    return store, cache


def _make_gate(
    *,
    limits: Optional[PlanLimits] = None,
    resolver: Optional[FakePlanLimitResolver] = None,
    cache: Optional[FakeCacheBackend] = None,
) -> tuple[
    LimitEnforcementGate,
    UsageCounterStore,
    FakeCacheBackend,
    FakePlanLimitResolver,
    FakeBillingMetrics,
]:
    """Build a LimitEnforcementGate wired to fakes. Returns (gate, *fakes)."""
    store, cache = _make_counter_store(cache=cache)
    res = resolver or FakePlanLimitResolver()
    if resolver is None:
        res.seed(DEFAULT_TENANT_ID, limits)
    metrics = FakeBillingMetrics()
    gate = LimitEnforcementGate(resolver=res, counter_store=store, metrics=metrics)
    return gate, store, cache, res, metrics


def _make_ledger(
    *,
    ledger_repo: Optional[FakeUsageLedgerRepository] = None,
    resolver: Optional[FakePlanLimitResolver] = None,
    now: datetime = NOW,
) -> tuple[
    UsageLedger,
    FakeUsageLedgerRepository,
    FakeUsageEventRepository,
    FakePlanLimitResolver,
]:
    """Build a UsageLedger wired to fakes. Returns (ledger, *fakes)."""
    lr = ledger_repo or FakeUsageLedgerRepository()
    er = FakeUsageEventRepository()
    res = resolver or FakePlanLimitResolver()
    ledger = UsageLedger(ledger_repo=lr, event_repo=er, resolver=res, clock=lambda: now)
    return ledger, lr, er, res


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    """AsyncMock database session; fakes ignore it."""
    return AsyncMock()
