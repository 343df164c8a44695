"""Plans domain exceptions."""

from plangate.core.exceptions import InvalidStateError, NotFoundException


class InvalidPlanLimitsError(ValueError):
    """A plan limit is negative or not a finite number."""

    def __init__(self, key: str, value: object):
        """Initialize with the offending key and value."""
        self.key = key
        self.value = value
        super().__init__(f"Invalid plan limit for {key}: {value}")


class PlanNotFoundError(NotFoundException):
    """Raised when a plan id doesn't exist."""

    def __init__(self, message: str = "Plan not found"):
        """Initialize with default message."""
        super().__init__(message)


class PlanScopeError(InvalidStateError):
    """Manual-invoicing plans must be scoped to a tenant."""

    def __init__(
        self, message: str = "manual_invoicing plans must be associated with a tenant_id"
    ):
        """Initialize with default message."""
        super().__init__(message)
