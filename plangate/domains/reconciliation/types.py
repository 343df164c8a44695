"""Reconciliation domain types."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

DAILY_SNAPSHOT_JOB = "daily-usage-snapshot"
MONTHLY_RESET_JOB = "monthly-usage-reset"


@dataclass
class ReconciliationRunSummary:
    """Counters for a single job run, returned to the scheduler and logged."""

    job: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    tenants_processed: int = 0
    tenants_skipped: int = 0
    tenants_failed: int = 0
    metrics_processed: int = 0
    metrics_failed: int = 0
    events_emitted: int = 0
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form for activity results and log dimensions."""
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["finished_at"] = self.finished_at.isoformat() if self.finished_at else None
        return data
