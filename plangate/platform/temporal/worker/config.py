"""Worker configuration."""

from dataclasses import dataclass
from datetime import timedelta

from plangate.core.config import settings


@dataclass(frozen=True)
class WorkerConfig:
    """Worker configuration - all tunables in one place.

    Attributes:
        task_queue: Temporal task queue name
        metrics_port: Port for the Prometheus exporter
        graceful_shutdown_timeout_seconds: How long to wait for activities to complete
        daily_snapshot_cron: Cron expression of the daily snapshot schedule
        monthly_reset_cron: Cron expression of the monthly reset schedule

        max_concurrent_activities: Reconciliation jobs are long and few
        default_heartbeat_throttle_interval: How often to send heartbeats
        max_heartbeat_throttle_interval: Max heartbeat interval
    """

    task_queue: str
    metrics_port: int
    graceful_shutdown_timeout_seconds: int
    daily_snapshot_cron: str
    monthly_reset_cron: str

    max_concurrent_activities: int = 4

    # Heartbeat settings (affects cancel delivery speed)
    default_heartbeat_throttle_interval: timedelta = timedelta(seconds=2)
    max_heartbeat_throttle_interval: timedelta = timedelta(seconds=2)

    @classmethod
    def from_settings(cls) -> "WorkerConfig":
        """Build config from environment settings."""
        return cls(
            task_queue=settings.TEMPORAL_TASK_QUEUE,
            metrics_port=settings.METRICS_PORT,
            graceful_shutdown_timeout_seconds=settings.TEMPORAL_GRACEFUL_SHUTDOWN_TIMEOUT,
            daily_snapshot_cron=settings.DAILY_SNAPSHOT_CRON,
            monthly_reset_cron=settings.MONTHLY_RESET_CRON,
        )
