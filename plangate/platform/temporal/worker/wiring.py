"""Activity and workflow wiring.

This module is the DI wiring point for Temporal.
It connects activities to their dependencies from the container.
"""

from plangate.core.logging import logger


def create_activities() -> list:
    """Create activity instances with dependencies from the container.

    Returns:
        List of activity .run methods to register with the worker.
    """
    from plangate.core.config import settings
    from plangate.core.container import container
    from plangate.db.session import get_db_context
    from plangate.platform.temporal.activities import (
        DailyUsageSnapshotActivity,
        MonthlyUsageResetActivity,
        PurgeProcessedEventsActivity,
    )

    if container is None:
        raise RuntimeError("Container not initialized. Call initialize_container() first.")

    logger.debug("Wiring activities with container dependencies")

    return [
        DailyUsageSnapshotActivity(job=container.daily_snapshot_job).run,
        MonthlyUsageResetActivity(job=container.monthly_reset_job).run,
        PurgeProcessedEventsActivity(
            processed_repo=container.processed_event_repo,
            session_factory=get_db_context,
            retention_hours=settings.PROCESSED_EVENT_RETENTION_HOURS,
        ).run,
    ]


def get_workflows() -> list:
    """Get workflow classes to register.

    Returns:
        List of workflow classes.
    """
    from plangate.platform.temporal.workflows import (
        DailyUsageSnapshotWorkflow,
        MonthlyUsageResetWorkflow,
    )

    return [DailyUsageSnapshotWorkflow, MonthlyUsageResetWorkflow]
