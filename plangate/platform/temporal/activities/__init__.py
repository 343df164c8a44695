"""Temporal activity classes.

Each activity is a class with:
- Dependencies declared as dataclass fields
- A @activity.defn decorated method

Activities are instantiated and wired in worker/wiring.py from the DI
container. Workflows import the method references below; at runtime
Temporal matches by the name set in @activity.defn.
"""

from plangate.platform.temporal.activities.usage import (
    DailyUsageSnapshotActivity,
    MonthlyUsageResetActivity,
    PurgeProcessedEventsActivity,
)

daily_usage_snapshot_activity = DailyUsageSnapshotActivity.run
monthly_usage_reset_activity = MonthlyUsageResetActivity.run
purge_processed_events_activity = PurgeProcessedEventsActivity.run

__all__ = [
    # Activity classes (for worker instantiation)
    "DailyUsageSnapshotActivity",
    "MonthlyUsageResetActivity",
    "PurgeProcessedEventsActivity",
    # Activity method references (for workflow imports)
    "daily_usage_snapshot_activity",
    "monthly_usage_reset_activity",
    "purge_processed_events_activity",
]
