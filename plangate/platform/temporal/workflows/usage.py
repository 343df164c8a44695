"""Temporal workflows for usage reconciliation.

The workflow start time is handed to the activity so that activity
retries reconcile the same day (or close the same month).
"""

from datetime import timedelta
from typing import Any

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from plangate.platform.temporal.activities import (
        daily_usage_snapshot_activity,
        monthly_usage_reset_activity,
        purge_processed_events_activity,
    )

_RETRY_POLICY = RetryPolicy(
    maximum_attempts=3,
    initial_interval=timedelta(seconds=30),
    maximum_interval=timedelta(minutes=5),
    backoff_coefficient=2.0,
)


@workflow.defn
class DailyUsageSnapshotWorkflow:
    """Snapshot live usage into the ledger, then purge stale webhook markers."""

    @workflow.run
    async def run(self) -> dict[str, Any]:
        """Execute the daily snapshot workflow.

        Returns:
        -------
            dict[str, Any]: The snapshot run summary and the purge result

        """
        summary = await workflow.execute_activity(
            daily_usage_snapshot_activity,
            workflow.now().isoformat(),
            start_to_close_timeout=timedelta(hours=2),
            heartbeat_timeout=timedelta(minutes=1),
            retry_policy=_RETRY_POLICY,
        )
        purge = await workflow.execute_activity(
            purge_processed_events_activity,
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=_RETRY_POLICY,
        )
        return {"snapshot": summary, "purge": purge}


@workflow.defn
class MonthlyUsageResetWorkflow:
    """Close the previous calendar month for every tenant."""

    @workflow.run
    async def run(self) -> dict[str, Any]:
        """Execute the monthly reset workflow."""
        return await workflow.execute_activity(
            monthly_usage_reset_activity,
            workflow.now().isoformat(),
            start_to_close_timeout=timedelta(hours=4),
            heartbeat_timeout=timedelta(minutes=1),
            retry_policy=_RETRY_POLICY,
        )
