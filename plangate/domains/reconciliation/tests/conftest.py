"""Reconciliation domain test fixtures and helpers."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID

from plangate.adapters.cache.fake import FakeCacheBackend
from plangate.adapters.event_bus.fake import FakeEventBus
from plangate.adapters.metrics.billing import FakeBillingMetrics
from plangate.domains.plans.fakes.resolver import FakePlanLimitResolver
from plangate.domains.reconciliation.base import ReconciliationJob
from plangate.domains.tenants.fakes import FakeTenantRepository
from plangate.domains.usage.counter_store import UsageCounterStore
from plangate.domains.usage.fakes.repository import (
    FakeUsageEventRepository,
    FakeUsageLedgerRepository,
)
from plangate.domains.usage.ledger import UsageLedger

TENANT_A = UUID("00000000-0000-0000-0000-00000000000a")
TENANT_B = UUID("00000000-0000-0000-0000-00000000000b")

MID_MARCH = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
FIRST_OF_APRIL = datetime(2024, 4, 1, 0, 5, tzinfo=timezone.utc)

TTL = 60 * 24 * 60 * 60


class FakeSessionFactory:
    """Callable yielding AsyncMock sessions; remembers every session handed out."""

    def __init__(self) -> None:
        self.sessions: list[AsyncMock] = []

    @asynccontextmanager
    async def __call__(self):
        session = AsyncMock()
        self.sessions.append(session)
        yield session

    def commits(self) -> int:
        """Total commits across all sessions."""
        return sum(s.commit.await_count for s in self.sessions)

    def rollbacks(self) -> int:
        """Total rollbacks across all sessions."""
        return sum(s.rollback.await_count for s in self.sessions)


@dataclass
class JobHarness:
    """A job plus every fake it was wired with."""

    job: ReconciliationJob
    sessions: FakeSessionFactory
    tenants: FakeTenantRepository
    cache: FakeCacheBackend
    store: UsageCounterStore
    ledger_repo: FakeUsageLedgerRepository
    event_repo: FakeUsageEventRepository
    resolver: FakePlanLimitResolver
    bus: FakeEventBus
    metrics: FakeBillingMetrics


def _make_job(
    job_cls: type[ReconciliationJob],
    *,
    now: datetime,
    tenants: tuple[UUID, ...] = (TENANT_A,),
    resolver: Optional[FakePlanLimitResolver] = None,
    tenant_timeout_seconds: float = 5.0,
) -> JobHarness:
    """Build *job_cls* wired to fakes with a clock frozen at *now*."""
    sessions = FakeSessionFactory()
    tenant_repo = FakeTenantRepository(list(tenants))
    cache = FakeCacheBackend()
    store = UsageCounterStore(
        cache, counter_ttl_seconds=TTL, threshold_ttl_seconds=TTL, clock=lambda: now
    )
    ledger_repo = FakeUsageLedgerRepository()
    event_repo = FakeUsageEventRepository()
    res = resolver or FakePlanLimitResolver()
    ledger = UsageLedger(
        ledger_repo=ledger_repo, event_repo=event_repo, resolver=res, clock=lambda: now
    )
    bus = FakeEventBus()
    metrics = FakeBillingMetrics()
    job = job_cls(
        session_factory=sessions,
        tenant_repo=tenant_repo,
        counter_store=store,
        ledger=ledger,
        event_repo=event_repo,
        resolver=res,
        event_bus=bus,
        metrics=metrics,
        tenant_timeout_seconds=tenant_timeout_seconds,
        clock=lambda: now,
    )
    return JobHarness(
        job=job,
        sessions=sessions,
        tenants=tenant_repo,
        cache=cache,
        store=store,
        ledger_repo=ledger_repo,
        event_repo=event_repo,
        resolver=res,
        bus=bus,
        metrics=metrics,
    )
