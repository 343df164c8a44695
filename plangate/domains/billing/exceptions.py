"""Billing domain exceptions."""

from plangate.core.exceptions import InvalidStateError, PlanGateException


class WebhookSignatureError(PlanGateException):
    """Raised when a webhook payload or its signature fails verification."""

    def __init__(self, message: str = "Invalid webhook signature"):
        """Initialize with default message."""
        self.message = message
        super().__init__(message)


class MalformedExternalEventError(InvalidStateError):
    """A verified provider event is missing data required to act on it.

    Terminal: the event is acknowledged and recorded, never retried.
    """

    def __init__(self, message: str = "External event is missing required data"):
        """Initialize with default message."""
        super().__init__(message)
