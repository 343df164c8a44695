"""Shared run loop for the reconciliation jobs.

A run walks every active tenant and, inside a tenant, every metric the
counter store has registered for it. Failures are isolated at both
levels: a failing metric is rolled back and logged, a failing or slow
tenant is logged and the run moves on. Cancellation is honoured between
tenants only, so a tenant is never left half-reconciled by a cancel.
"""

import asyncio
from datetime import datetime
from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from plangate.core.datetime_utils import utc_now
from plangate.core.exceptions import TransientStoreError
from plangate.core.logging import ContextualLogger, LoggerConfigurator
from plangate.core.protocols.event_bus import DomainEvent, EventBus
from plangate.core.protocols.metrics import BillingMetrics
from plangate.domains.plans.protocols import PlanLimitResolverProtocol
from plangate.domains.plans.types import PlanLimits, limit_for
from plangate.domains.reconciliation.exceptions import JobAlreadyRunningError
from plangate.domains.reconciliation.types import ReconciliationRunSummary
from plangate.domains.tenants.protocols import TenantRepositoryProtocol
from plangate.domains.usage.protocols import UsageCounterStoreProtocol, UsageLedgerProtocol
from plangate.domains.usage.repository import UsageEventRepositoryProtocol

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

_cache_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, max=2),
    retry=retry_if_exception_type(TransientStoreError),
    reraise=True,
)


class ReconciliationJob:
    """Base class: tenant iteration, isolation, time budget and summary."""

    job_name: str = "reconciliation"

    def __init__(
        self,
        session_factory: SessionFactory,
        tenant_repo: TenantRepositoryProtocol,
        counter_store: UsageCounterStoreProtocol,
        ledger: UsageLedgerProtocol,
        event_repo: UsageEventRepositoryProtocol,
        resolver: PlanLimitResolverProtocol,
        event_bus: EventBus,
        metrics: BillingMetrics,
        tenant_timeout_seconds: float = 60.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize with all required dependencies."""
        self._session_factory = session_factory
        self._tenant_repo = tenant_repo
        self._counter_store = counter_store
        self._ledger = ledger
        self._event_repo = event_repo
        self._resolver = resolver
        self._event_bus = event_bus
        self._metrics = metrics
        self._tenant_timeout = tenant_timeout_seconds
        self._clock = clock
        self._running = False
        self._log = LoggerConfigurator.configure_logger(
            f"plangate.reconciliation.{self.job_name}", dimensions={"job": self.job_name}
        )

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(
        self,
        now: Optional[datetime] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ReconciliationRunSummary:
        """Reconcile every active tenant once.

        Raises:
            JobAlreadyRunningError: If a run of this job is still in progress.
        """
        if self._running:
            self._log.warning("Run requested while a previous run is in progress; rejecting")
            raise JobAlreadyRunningError(self.job_name)

        self._running = True
        try:
            now = now or self._clock()
            summary = ReconciliationRunSummary(job=self.job_name, started_at=now)
            self._log.info(f"Starting {self.job_name} run for {now.isoformat()}")

            async with self._session_factory() as db:
                tenant_ids = await self._tenant_repo.list_active_tenant_ids(db)

            for tenant_id in tenant_ids:
                if cancel_event is not None and cancel_event.is_set():
                    summary.cancelled = True
                    self._log.warning("Run cancelled; stopping before next tenant")
                    break
                await self._run_tenant(tenant_id, now, summary)

            summary.finished_at = self._clock()
            self._log.with_context(**summary.to_dict()).info(f"Finished {self.job_name} run")
            return summary
        finally:
            self._running = False

    async def _run_tenant(
        self, tenant_id: UUID, now: datetime, summary: ReconciliationRunSummary
    ) -> None:
        log = self._log.with_context(tenant_id=str(tenant_id))
        try:
            await asyncio.wait_for(
                self._reconcile_tenant(tenant_id, now, summary, log),
                timeout=self._tenant_timeout,
            )
        except asyncio.TimeoutError:
            summary.tenants_skipped += 1
            self._metrics.inc_reconciliation(self.job_name, "skipped")
            log.warning(f"Tenant exceeded {self._tenant_timeout}s budget; skipping")
        except Exception as e:
            summary.tenants_failed += 1
            self._metrics.inc_reconciliation(self.job_name, "failed")
            log.error(f"Tenant reconciliation failed: {e}", exc_info=True)
        else:
            summary.tenants_processed += 1
            self._metrics.inc_reconciliation(self.job_name, "processed")

    async def _reconcile_tenant(
        self,
        tenant_id: UUID,
        now: datetime,
        summary: ReconciliationRunSummary,
        log: ContextualLogger,
    ) -> None:
        metric_names = await self._counter_store.list_metrics(tenant_id)
        if not metric_names:
            return

        async with self._session_factory() as db:
            limits = await self._resolver.resolve(db, tenant_id)
            for metric in sorted(metric_names):
                metric_log = log.with_context(metric=metric)
                try:
                    events = await self._reconcile_metric(db, tenant_id, metric, limits, now)
                    await db.commit()
                except Exception as e:
                    await db.rollback()
                    summary.metrics_failed += 1
                    metric_log.error(f"Metric reconciliation failed: {e}", exc_info=True)
                    continue

                summary.metrics_processed += 1
                try:
                    await self._after_commit(tenant_id, metric, events, now)
                except Exception as e:
                    metric_log.error(f"Post-commit step failed: {e}", exc_info=True)
                    continue
                summary.events_emitted += len(events)

    async def _reconcile_metric(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        limits: Optional[PlanLimits],
        now: datetime,
    ) -> list[DomainEvent]:
        """Stage the metric's writes in *db*; return events to publish after commit."""
        raise NotImplementedError

    async def _after_commit(
        self, tenant_id: UUID, metric: str, events: list[DomainEvent], now: datetime
    ) -> None:
        for event in events:
            await self._event_bus.publish(event)

    # Shared lookups

    @_cache_retry
    async def _read_usage(self, tenant_id: UUID, metric: str, period: str) -> int:
        return await self._counter_store.read(tenant_id, metric, period)

    @_cache_retry
    async def _limit_for(
        self, tenant_id: UUID, metric: str, limits: Optional[PlanLimits]
    ) -> Optional[int]:
        """Cache-level override when set, else the plan limit (None = unlimited)."""
        override = await self._counter_store.get_limit(tenant_id, metric)
        if override is not None:
            return override
        value = limit_for(limits, metric)
        return int(value) if value is not None else None
