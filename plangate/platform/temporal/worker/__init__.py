"""Temporal worker for the usage reconciliation jobs.

Package structure:
    config.py         - WorkerConfig dataclass
    wiring.py         - Activity and workflow registration (DI wiring)
    __init__.py       - TemporalWorker class and main() entry point
"""

import asyncio
import signal
from datetime import timedelta
from typing import Any

from temporalio.worker import Worker

from plangate.core.config import settings
from plangate.core.logging import logger

from .config import WorkerConfig
from .wiring import create_activities, get_workflows

__all__ = ["TemporalWorker", "WorkerConfig", "main"]


# =============================================================================
# Temporal Worker
# =============================================================================


class TemporalWorker:
    """Temporal worker lifecycle management.

    Responsibilities:
        - Ensure the reconciliation schedules exist
        - Start/stop the Temporal worker
        - Expose billing metrics for scraping
    """

    def __init__(self, config: WorkerConfig) -> None:
        """Initialize the Temporal worker."""
        self._config = config
        self._worker: Worker | None = None
        self._running = False

    def _start_metrics_server(self) -> None:
        from prometheus_client import start_http_server

        from plangate.core.container import container

        registry = getattr(container.metrics, "registry", None) if container else None
        if registry is None:
            logger.warning("Metrics adapter has no registry; exporter not started")
            return
        start_http_server(self._config.metrics_port, registry=registry)
        logger.info(f"Serving metrics on port {self._config.metrics_port}")

    async def start(self) -> None:
        """Ensure schedules, then run the worker until shutdown."""
        try:
            self._start_metrics_server()
        except Exception as e:
            logger.warning(f"Failed to start metrics exporter (metrics unavailable): {e}")

        from plangate.platform.temporal.client import temporal_client
        from plangate.platform.temporal.schedules import (
            UsageScheduleService,
            reconciliation_schedules,
        )

        client = await temporal_client.get_client()

        schedules = UsageScheduleService(client, self._config.task_queue)
        actions = await schedules.ensure_all(
            reconciliation_schedules(
                self._config.daily_snapshot_cron, self._config.monthly_reset_cron
            )
        )
        logger.info(f"Reconciliation schedules: {actions}")

        logger.info(f"Starting Temporal worker on task queue: {self._config.task_queue}")
        self._worker = Worker(
            client,
            task_queue=self._config.task_queue,
            workflows=get_workflows(),
            activities=create_activities(),
            max_concurrent_activities=self._config.max_concurrent_activities,
            default_heartbeat_throttle_interval=self._config.default_heartbeat_throttle_interval,
            max_heartbeat_throttle_interval=self._config.max_heartbeat_throttle_interval,
            graceful_shutdown_timeout=timedelta(
                seconds=self._config.graceful_shutdown_timeout_seconds
            ),
        )

        self._running = True
        logger.info(
            f"Worker started with graceful shutdown timeout: "
            f"{self._config.graceful_shutdown_timeout_seconds}s"
        )
        await self._worker.run()

    async def stop(self) -> None:
        """Stop the worker and release shared clients."""
        if self._worker and self._running:
            logger.info("Stopping worker gracefully")
            self._running = False
            await self._worker.shutdown()

        from plangate.core.redis_client import redis_client
        from plangate.platform.temporal.client import temporal_client

        await temporal_client.close()
        await redis_client.close()


# =============================================================================
# Entry Point
# =============================================================================


async def main() -> None:
    """Main entry point for the worker process."""
    from plangate.core.container import initialize_container

    logger.info("Initializing dependency injection container...")
    initialize_container(settings)
    logger.info("Container initialized successfully")

    config = WorkerConfig.from_settings()
    worker = TemporalWorker(config)

    def signal_handler(signum: int, frame: Any) -> None:
        logger.info(f"Received signal {signum}, shutting down...")
        asyncio.create_task(worker.stop())

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        await worker.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        await worker.stop()


if __name__ == "__main__":
    asyncio.run(main())
