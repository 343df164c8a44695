"""Usage reconciliation activities.

Activity classes with explicit dependency injection. Each job runs in its
own task while the activity heartbeats; a Temporal cancellation is turned
into the job's cooperative cancel event, so the tenant in flight finishes
before the activity gives up.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from temporalio import activity

from plangate.core.datetime_utils import utc_now
from plangate.core.logging import LoggerConfigurator
from plangate.domains.billing.repository import ProcessedEventRepositoryProtocol
from plangate.domains.reconciliation.exceptions import JobAlreadyRunningError
from plangate.domains.reconciliation.protocols import ReconciliationJobProtocol


def _parse_now(now_iso: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(now_iso) if now_iso else None


async def run_job_with_heartbeat(
    job: ReconciliationJobProtocol, now: Optional[datetime]
) -> Dict[str, Any]:
    """Run *job* to completion, heartbeating every second.

    Returns the run summary as a dict. A run rejected because the job is
    already running returns ``{"job": ..., "already_running": True}``.
    """
    logger = LoggerConfigurator.configure_logger(
        "plangate.temporal.reconciliation", dimensions={"job": job.job_name}
    )
    cancel_event = asyncio.Event()
    job_task = asyncio.create_task(job.run(now=now, cancel_event=cancel_event))

    try:
        while True:
            done, _ = await asyncio.wait({job_task}, timeout=1)
            if job_task in done:
                break
            activity.heartbeat(f"{job.job_name} in progress")
    except asyncio.CancelledError:
        logger.warning("Activity cancelled; stopping job at the next tenant boundary")
        cancel_event.set()
        while not job_task.done():
            try:
                await asyncio.wait_for(asyncio.shield(job_task), timeout=1)
            except asyncio.TimeoutError:
                activity.heartbeat(f"Cancelling {job.job_name}...")
            except Exception:
                break
        raise

    try:
        summary = job_task.result()
    except JobAlreadyRunningError:
        logger.warning("Job already running in this worker; skipping")
        return {"job": job.job_name, "already_running": True}
    return summary.to_dict()


@dataclass
class DailyUsageSnapshotActivity:
    """Persist today's usage for every active tenant.

    Dependencies:
        job: DailyUsageSnapshotJob
    """

    job: ReconciliationJobProtocol

    @activity.defn(name="daily_usage_snapshot_activity")
    async def run(self, now_iso: Optional[str] = None) -> Dict[str, Any]:
        """Run the daily snapshot.

        Args:
            now_iso: Workflow start time; keeps retries on the same day.
        """
        return await run_job_with_heartbeat(self.job, _parse_now(now_iso))


@dataclass
class MonthlyUsageResetActivity:
    """Close the previous month for every active tenant.

    Dependencies:
        job: MonthlyUsageResetJob
    """

    job: ReconciliationJobProtocol

    @activity.defn(name="monthly_usage_reset_activity")
    async def run(self, now_iso: Optional[str] = None) -> Dict[str, Any]:
        """Run the monthly reset.

        Args:
            now_iso: Workflow start time; keeps retries on the same month.
        """
        return await run_job_with_heartbeat(self.job, _parse_now(now_iso))


@dataclass
class PurgeProcessedEventsActivity:
    """Delete processed-event markers past their retention window.

    Dependencies:
        processed_repo: ProcessedEventRepositoryProtocol
        session_factory: async context manager yielding a session
        retention_hours: how long markers are kept
    """

    processed_repo: ProcessedEventRepositoryProtocol
    session_factory: Callable[[], AsyncContextManager[AsyncSession]]
    retention_hours: int
    clock: Callable[[], datetime] = utc_now

    @activity.defn(name="purge_processed_events_activity")
    async def run(self) -> Dict[str, Any]:
        """Purge stale markers and return how many were deleted."""
        logger = LoggerConfigurator.configure_logger("plangate.temporal.purge_processed_events")
        cutoff = self.clock() - timedelta(hours=self.retention_hours)
        async with self.session_factory() as db:
            deleted = await self.processed_repo.purge_older_than(db, cutoff)
            await db.commit()
        logger.info(f"Purged {deleted} processed-event markers older than {cutoff.isoformat()}")
        return {"deleted": deleted, "cutoff": cutoff.isoformat()}
