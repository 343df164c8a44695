"""Reconciliation domain exceptions."""

from plangate.core.exceptions import InvalidStateError


class JobAlreadyRunningError(InvalidStateError):
    """Raised when a reconciliation job is started while a run is in progress."""

    def __init__(self, job: str):
        """Initialize with the name of the busy job."""
        self.job = job
        super().__init__(f"Reconciliation job '{job}' is already running")
