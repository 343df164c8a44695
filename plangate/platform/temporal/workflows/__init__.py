"""Temporal workflows."""

from plangate.platform.temporal.workflows.usage import (
    DailyUsageSnapshotWorkflow,
    MonthlyUsageResetWorkflow,
)

__all__ = ["DailyUsageSnapshotWorkflow", "MonthlyUsageResetWorkflow"]
