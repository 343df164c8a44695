"""Temporal schedules for the reconciliation workflows.

Schedule ids are stable, so starting several workers converges on one
schedule per job. Overlapping runs are skipped; a run that is still in
progress when the next fire time arrives is not doubled up.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from croniter import croniter
from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleOverlapPolicy,
    SchedulePolicy,
    ScheduleSpec,
    ScheduleState,
    ScheduleUpdate,
    ScheduleUpdateInput,
)
from temporalio.service import RPCError, RPCStatusCode

from plangate.core.logging import logger
from plangate.domains.reconciliation.types import DAILY_SNAPSHOT_JOB, MONTHLY_RESET_JOB
from plangate.platform.temporal.workflows import (
    DailyUsageSnapshotWorkflow,
    MonthlyUsageResetWorkflow,
)


@dataclass(frozen=True)
class ScheduleDefinition:
    """One cron-triggered workflow."""

    schedule_id: str
    workflow: Any
    cron_expression: str
    note: str

    @property
    def workflow_id(self) -> str:
        return f"{self.schedule_id}-workflow"


def reconciliation_schedules(
    daily_cron: str, monthly_cron: str
) -> list[ScheduleDefinition]:
    """Schedule definitions for the two reconciliation jobs.

    Raises ValueError if either cron expression is invalid.
    """
    for cron in (daily_cron, monthly_cron):
        if not croniter.is_valid(cron):
            raise ValueError(f"Invalid CRON expression: {cron}")
    return [
        ScheduleDefinition(
            schedule_id=DAILY_SNAPSHOT_JOB,
            workflow=DailyUsageSnapshotWorkflow.run,
            cron_expression=daily_cron,
            note="Daily usage snapshot into the ledger",
        ),
        ScheduleDefinition(
            schedule_id=MONTHLY_RESET_JOB,
            workflow=MonthlyUsageResetWorkflow.run,
            cron_expression=monthly_cron,
            note="Monthly usage summary and counter reset",
        ),
    ]


class UsageScheduleService:
    """Create or update the reconciliation schedules."""

    def __init__(self, client: Client, task_queue: str) -> None:
        """Initialize with a connected client and the worker task queue."""
        self._client = client
        self._task_queue = task_queue

    async def _current_cron(self, schedule_id: str) -> Optional[list[str]]:
        """Cron expressions of an existing schedule, or None when it does not exist."""
        try:
            desc = await self._client.get_schedule_handle(schedule_id).describe()
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                return None
            raise
        return list(desc.schedule.spec.cron_expressions)

    async def ensure(self, definition: ScheduleDefinition) -> str:
        """Create the schedule, or update its cron when it drifted. Returns the action taken."""
        existing = await self._current_cron(definition.schedule_id)
        if existing is None:
            await self._client.create_schedule(
                definition.schedule_id,
                Schedule(
                    action=ScheduleActionStartWorkflow(
                        definition.workflow,
                        id=definition.workflow_id,
                        task_queue=self._task_queue,
                    ),
                    spec=ScheduleSpec(
                        cron_expressions=[definition.cron_expression],
                        start_at=datetime.now(timezone.utc),
                    ),
                    policy=SchedulePolicy(overlap=ScheduleOverlapPolicy.SKIP),
                    state=ScheduleState(note=definition.note, paused=False),
                ),
            )
            logger.info(
                f"Created schedule {definition.schedule_id} with cron {definition.cron_expression}"
            )
            return "created"

        if existing == [definition.cron_expression]:
            logger.debug(f"Schedule {definition.schedule_id} is up to date")
            return "unchanged"

        def _updater(input: ScheduleUpdateInput) -> ScheduleUpdate:
            schedule = input.description.schedule
            schedule.spec = ScheduleSpec(
                cron_expressions=[definition.cron_expression],
                start_at=datetime.now(timezone.utc),
            )
            return ScheduleUpdate(schedule=schedule)

        await self._client.get_schedule_handle(definition.schedule_id).update(_updater)
        logger.info(
            f"Updated schedule {definition.schedule_id} from {existing} "
            f"to {definition.cron_expression}"
        )
        return "updated"

    async def ensure_all(self, definitions: list[ScheduleDefinition]) -> dict[str, str]:
        """Ensure every schedule; returns schedule id -> action."""
        return {d.schedule_id: await self.ensure(d) for d in definitions}
