"""Unit tests for DailyUsageSnapshotJob and the shared run loop."""

import asyncio
from typing import Optional
from uuid import UUID

import pytest

from plangate.core.events import UsageEventType
from plangate.domains.plans.fakes.resolver import FakePlanLimitResolver
from plangate.domains.reconciliation.daily_snapshot import DailyUsageSnapshotJob
from plangate.domains.reconciliation.exceptions import JobAlreadyRunningError
from plangate.domains.reconciliation.tests.conftest import (
    MID_MARCH,
    TENANT_A,
    TENANT_B,
    _make_job,
)
from plangate.domains.reconciliation.types import DAILY_SNAPSHOT_JOB

TODAY = MID_MARCH.date()


def _make_daily(**kwargs):
    return _make_job(DailyUsageSnapshotJob, now=MID_MARCH, **kwargs)


class _ScriptedResolver(FakePlanLimitResolver):
    """Resolver that can fail, stall or block for chosen tenants."""

    def __init__(
        self,
        failing: Optional[UUID] = None,
        stalling: Optional[UUID] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        super().__init__()
        self._failing = failing
        self._stalling = stalling
        self._gate = gate

    async def resolve(self, db, tenant_id):
        if tenant_id == self._failing:
            raise RuntimeError("resolver exploded")
        if tenant_id == self._stalling:
            await asyncio.sleep(10)
        if self._gate is not None:
            await self._gate.wait()
        return await super().resolve(db, tenant_id)


# ===========================================================================
# Snapshots and thresholds
# ===========================================================================


class TestSnapshot:
    @pytest.mark.asyncio
    async def test_writes_today_row_with_limit(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 1000})
        await h.store.increment(TENANT_A, "api_calls", 40)

        summary = await h.job.run()

        row = h.ledger_repo.rows[(TENANT_A, "api_calls", TODAY)]
        assert row.current_usage == 40
        assert row.limit_value == 1000
        assert summary.tenants_processed == 1
        assert summary.metrics_processed == 1
        assert summary.events_emitted == 0
        assert h.sessions.commits() == 1

    @pytest.mark.asyncio
    async def test_second_run_same_day_updates_the_one_row(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 1000})
        await h.store.increment(TENANT_A, "api_calls", 40)
        await h.job.run()

        await h.store.increment(TENANT_A, "api_calls", 5)
        h.resolver.seed(TENANT_A, None)
        await h.job.run()

        rows = [key for key in h.ledger_repo.rows if key[:2] == (TENANT_A, "api_calls")]
        assert rows == [(TENANT_A, "api_calls", TODAY)]
        row = h.ledger_repo.rows[(TENANT_A, "api_calls", TODAY)]
        assert row.current_usage == 45
        assert row.limit_value == 1000
        assert h.ledger_repo.call_count("upsert") == 2

    @pytest.mark.asyncio
    async def test_unlimited_metric_has_no_limit_and_no_events(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 10})
        await h.store.increment(TENANT_A, "entities", 500)

        await h.job.run()

        assert h.ledger_repo.rows[(TENANT_A, "entities", TODAY)].limit_value is None
        assert h.bus.events == []

    @pytest.mark.asyncio
    async def test_tenant_without_metrics_is_a_noop(self):
        h = _make_daily()

        summary = await h.job.run()

        assert summary.tenants_processed == 1
        assert h.ledger_repo.rows == {}
        assert h.resolver.resolve_calls == 0

    @pytest.mark.asyncio
    async def test_cache_override_takes_precedence(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 1000})
        await h.store.set_limit(TENANT_A, "api_calls", 50)
        await h.store.increment(TENANT_A, "api_calls", 45)

        await h.job.run()

        event = h.bus.assert_published(UsageEventType.THRESHOLD_CROSSED)
        assert event.limit == 50
        assert event.threshold == 80
        assert h.ledger_repo.rows[(TENANT_A, "api_calls", TODAY)].limit_value == 50


class TestThresholds:
    @pytest.mark.asyncio
    async def test_crossing_80_percent(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 100})
        await h.store.increment(TENANT_A, "api_calls", 85)

        summary = await h.job.run()

        event = h.bus.assert_published(UsageEventType.THRESHOLD_CROSSED)
        assert event.tenant_id == TENANT_A
        assert event.metric == "api_calls"
        assert event.threshold == 80
        assert event.usage == 85
        assert event.percentage == 85.0
        assert event.month == "2024-03"
        assert event.period_date == TODAY
        assert len(h.bus.events) == 1
        assert summary.events_emitted == 1

        (stored,) = h.event_repo.of_type(UsageEventType.THRESHOLD_CROSSED.value)
        assert stored.event_metadata["threshold"] == 80
        assert stored.event_metadata["month"] == "2024-03"
        assert await h.store.is_triggered(TENANT_A, "api_calls", 80) is True
        assert await h.store.is_triggered(TENANT_A, "api_calls", 100) is False

    @pytest.mark.asyncio
    async def test_reaching_limit_fires_both_thresholds(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 100})
        await h.store.increment(TENANT_A, "api_calls", 100)

        await h.job.run()

        thresholds = [e.threshold for e in h.bus.get_events(UsageEventType.THRESHOLD_CROSSED)]
        assert thresholds == [80, 100]

    @pytest.mark.asyncio
    async def test_each_threshold_fires_once_per_cycle(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 100})
        await h.store.increment(TENANT_A, "api_calls", 85)

        await h.job.run()
        await h.store.increment(TENANT_A, "api_calls", 5)
        await h.job.run()
        await h.store.increment(TENANT_A, "api_calls", 20)
        await h.job.run()

        thresholds = [e.threshold for e in h.bus.get_events(UsageEventType.THRESHOLD_CROSSED)]
        assert thresholds == [80, 100]
        assert len(h.event_repo.of_type(UsageEventType.THRESHOLD_CROSSED.value)) == 2

    @pytest.mark.asyncio
    async def test_zero_limit_never_notifies(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 0})
        await h.store.increment(TENANT_A, "api_calls", 5)

        await h.job.run()

        assert h.bus.events == []

    @pytest.mark.asyncio
    async def test_failed_metric_is_rolled_back_without_event(self):
        h = _make_daily()
        h.resolver.seed(TENANT_A, {"api_calls": 100, "entities": 100})
        await h.store.increment(TENANT_A, "api_calls", 90)
        await h.store.increment(TENANT_A, "entities", 90)
        upsert = h.ledger_repo.upsert

        async def _flaky_upsert(db, tenant_id, metric, *args):
            if metric == "api_calls":
                raise RuntimeError("constraint violation")
            return await upsert(db, tenant_id, metric, *args)

        h.ledger_repo.upsert = _flaky_upsert

        summary = await h.job.run()

        assert summary.metrics_failed == 1
        assert summary.metrics_processed == 1
        assert summary.tenants_processed == 1
        assert h.sessions.rollbacks() == 1
        assert [e.metric for e in h.bus.events] == ["entities"]
        assert await h.store.is_triggered(TENANT_A, "api_calls", 80) is False


# ===========================================================================
# Run loop: isolation, budget, cancellation, re-entrancy
# ===========================================================================


class TestRunLoop:
    @pytest.mark.asyncio
    async def test_failing_tenant_does_not_stop_run(self):
        resolver = _ScriptedResolver(failing=TENANT_A)
        h = _make_daily(tenants=(TENANT_A, TENANT_B), resolver=resolver)
        resolver.seed(TENANT_B, {"api_calls": 100})
        await h.store.increment(TENANT_A, "api_calls", 1)
        await h.store.increment(TENANT_B, "api_calls", 1)

        summary = await h.job.run()

        assert summary.tenants_failed == 1
        assert summary.tenants_processed == 1
        assert (TENANT_B, "api_calls", TODAY) in h.ledger_repo.rows
        assert h.metrics.reconciliation[(DAILY_SNAPSHOT_JOB, "failed")] == 1
        assert h.metrics.reconciliation[(DAILY_SNAPSHOT_JOB, "processed")] == 1

    @pytest.mark.asyncio
    async def test_slow_tenant_is_skipped(self):
        resolver = _ScriptedResolver(stalling=TENANT_A)
        h = _make_daily(
            tenants=(TENANT_A, TENANT_B), resolver=resolver, tenant_timeout_seconds=0.05
        )
        await h.store.increment(TENANT_A, "api_calls", 1)
        await h.store.increment(TENANT_B, "api_calls", 1)

        summary = await h.job.run()

        assert summary.tenants_skipped == 1
        assert summary.tenants_processed == 1
        assert h.metrics.reconciliation[(DAILY_SNAPSHOT_JOB, "skipped")] == 1
        assert (TENANT_A, "api_calls", TODAY) not in h.ledger_repo.rows

    @pytest.mark.asyncio
    async def test_cancel_before_start_processes_nothing(self):
        h = _make_daily(tenants=(TENANT_A, TENANT_B))
        await h.store.increment(TENANT_A, "api_calls", 1)
        cancel = asyncio.Event()
        cancel.set()

        summary = await h.job.run(cancel_event=cancel)

        assert summary.cancelled is True
        assert summary.tenants_processed == 0
        assert h.ledger_repo.rows == {}

    @pytest.mark.asyncio
    async def test_second_run_is_rejected_while_running(self):
        gate = asyncio.Event()
        resolver = _ScriptedResolver(gate=gate)
        h = _make_daily(resolver=resolver)
        await h.store.increment(TENANT_A, "api_calls", 1)

        first = asyncio.create_task(h.job.run())
        for _ in range(10):
            await asyncio.sleep(0)
        assert h.job.is_running is True

        with pytest.raises(JobAlreadyRunningError):
            await h.job.run()

        gate.set()
        summary = await first
        assert summary.tenants_processed == 1
        assert h.job.is_running is False

    @pytest.mark.asyncio
    async def test_summary_is_serializable(self):
        h = _make_daily()

        data = (await h.job.run()).to_dict()

        assert data["job"] == DAILY_SNAPSHOT_JOB
        assert data["started_at"] == MID_MARCH.isoformat()
        assert data["finished_at"] == MID_MARCH.isoformat()
        assert data["cancelled"] is False
