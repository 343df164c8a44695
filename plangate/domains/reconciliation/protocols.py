"""Reconciliation domain protocols."""

import asyncio
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from plangate.domains.reconciliation.types import ReconciliationRunSummary


@runtime_checkable
class ReconciliationJobProtocol(Protocol):
    """A scheduled pass over every active tenant."""

    job_name: str

    async def run(
        self,
        now: Optional[datetime] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ReconciliationRunSummary:
        """Run the job once.

        Raises:
            JobAlreadyRunningError: If this instance is already running.
        """
        ...
