"""Unit tests for MonthlyUsageResetJob."""

from datetime import date

import pytest

from plangate.core.events import UsageEventType
from plangate.domains.reconciliation.monthly_reset import MonthlyUsageResetJob
from plangate.domains.reconciliation.tests.conftest import (
    FIRST_OF_APRIL,
    TENANT_A,
    TENANT_B,
    _make_job,
)
from plangate.domains.usage.counter_store import metrics_key, usage_key

MARCH = "2024-03"
LAST_OF_MARCH = date(2024, 3, 31)


def _make_monthly(**kwargs):
    return _make_job(MonthlyUsageResetJob, now=FIRST_OF_APRIL, **kwargs)


async def _seed_closed_month(h, tenant_id, metric: str, usage: int) -> None:
    h.cache.seed(usage_key(tenant_id, metric, MARCH), str(usage))
    await h.cache.sadd(metrics_key(tenant_id), metric)


class TestMonthlySummary:
    @pytest.mark.asyncio
    async def test_summarizes_from_counter_and_backfills_ledger(self):
        h = _make_monthly()
        h.resolver.seed(TENANT_A, {"api_calls": 100})
        await _seed_closed_month(h, TENANT_A, "api_calls", 70)

        summary = await h.job.run()

        event = h.bus.assert_published(UsageEventType.MONTHLY_SUMMARY)
        assert event.tenant_id == TENANT_A
        assert event.month == MARCH
        assert event.usage == 70
        assert event.limit == 100
        assert summary.events_emitted == 1

        row = h.ledger_repo.rows[(TENANT_A, "api_calls", LAST_OF_MARCH)]
        assert row.current_usage == 70
        (stored,) = h.event_repo.of_type(UsageEventType.MONTHLY_SUMMARY.value)
        assert stored.event_metadata == {"month": MARCH, "usage": 70, "limit": 100}

    @pytest.mark.asyncio
    async def test_prefers_last_day_ledger_row(self):
        h = _make_monthly()
        await _seed_closed_month(h, TENANT_A, "api_calls", 70)
        h.ledger_repo.seed(TENANT_A, "api_calls", LAST_OF_MARCH, 65, limit=100)

        await h.job.run()

        event = h.bus.assert_published(UsageEventType.MONTHLY_SUMMARY)
        assert event.usage == 65
        assert h.ledger_repo.call_count("upsert") == 0

    @pytest.mark.asyncio
    async def test_unlimited_metric_summary_has_no_limit(self):
        h = _make_monthly()
        await _seed_closed_month(h, TENANT_A, "entities", 12)

        await h.job.run()

        assert h.bus.assert_published(UsageEventType.MONTHLY_SUMMARY).limit is None

    @pytest.mark.asyncio
    async def test_every_tenant_and_metric_is_summarized(self):
        h = _make_monthly(tenants=(TENANT_A, TENANT_B))
        await _seed_closed_month(h, TENANT_A, "api_calls", 1)
        await _seed_closed_month(h, TENANT_A, "entities", 2)
        await _seed_closed_month(h, TENANT_B, "api_calls", 3)

        summary = await h.job.run()

        published = {
            (e.tenant_id, e.metric) for e in h.bus.get_events(UsageEventType.MONTHLY_SUMMARY)
        }
        assert published == {
            (TENANT_A, "api_calls"),
            (TENANT_A, "entities"),
            (TENANT_B, "api_calls"),
        }
        assert summary.metrics_processed == 3


class TestReset:
    @pytest.mark.asyncio
    async def test_clears_closed_counter_and_flags(self):
        h = _make_monthly()
        h.resolver.seed(TENANT_A, {"api_calls": 100})
        await _seed_closed_month(h, TENANT_A, "api_calls", 90)
        await h.store.mark_triggered(TENANT_A, "api_calls", 80)
        await h.store.increment(TENANT_A, "api_calls", 3)

        await h.job.run()

        assert await h.store.read(TENANT_A, "api_calls", MARCH) == 0
        assert await h.store.is_triggered(TENANT_A, "api_calls", 80) is False
        assert await h.store.read(TENANT_A, "api_calls") == 3

        closed = h.ledger_repo.rows[(TENANT_A, "api_calls", LAST_OF_MARCH)]
        assert closed.current_usage == 90
        assert closed.limit_value == 100

    @pytest.mark.asyncio
    async def test_rerun_does_not_duplicate_summary(self):
        h = _make_monthly()
        await _seed_closed_month(h, TENANT_A, "api_calls", 70)

        await h.job.run()
        second = await h.job.run()

        assert len(h.bus.get_events(UsageEventType.MONTHLY_SUMMARY)) == 1
        assert len(h.event_repo.of_type(UsageEventType.MONTHLY_SUMMARY.value)) == 1
        assert second.events_emitted == 0

    @pytest.mark.asyncio
    async def test_rerun_after_partial_failure_still_clears(self):
        h = _make_monthly()
        await _seed_closed_month(h, TENANT_A, "api_calls", 70)
        await h.event_repo.append(
            None,
            TENANT_A,
            UsageEventType.MONTHLY_SUMMARY.value,
            "api_calls",
            metadata={"month": MARCH, "usage": 70, "limit": None},
        )

        await h.job.run()

        assert h.bus.events == []
        assert await h.store.read(TENANT_A, "api_calls", MARCH) == 0

    @pytest.mark.asyncio
    async def test_failed_write_keeps_counter(self):
        h = _make_monthly()
        await _seed_closed_month(h, TENANT_A, "api_calls", 70)

        async def _broken_append(*args, **kwargs):
            raise RuntimeError("insert failed")

        h.event_repo.append = _broken_append

        summary = await h.job.run()

        assert summary.metrics_failed == 1
        assert h.bus.events == []
        assert await h.store.read(TENANT_A, "api_calls", MARCH) == 70
