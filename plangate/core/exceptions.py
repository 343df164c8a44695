"""Shared exceptions module."""

from typing import Optional


class PlanGateException(Exception):
    """Base exception for plangate services."""

    pass


class NotFoundException(PlanGateException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class InvalidStateError(PlanGateException):
    """Exception raised when an object is in an invalid state.

    Used when the request is well-formed but conflicts with the current
    state of the tenant (for example a usage limit being reached).
    """

    def __init__(self, message: Optional[str] = "Object is in an invalid state"):
        """Create a new InvalidStateError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class ExternalServiceError(PlanGateException):
    """Exception raised when an external service fails."""

    def __init__(self, service_name: str, message: Optional[str] = "External service failed"):
        """Create a new ExternalServiceError instance.

        Args:
        ----
            service_name (str): The name of the external service.
            message (str, optional): The error message. Has default message.

        """
        self.service_name = service_name
        self.message = message
        super().__init__(f"{service_name}: {message}")


class TransientStoreError(ExternalServiceError):
    """Raised when the counter cache or the database is unreachable."""

    def __init__(self, store: str = "cache", message: Optional[str] = "Store unavailable"):
        """Create a new TransientStoreError for the given store."""
        super().__init__(service_name=store, message=message)


class ConfigurationGapError(PlanGateException):
    """A plan could not be mapped to a price or a price to a plan row.

    Resolution returns ``None`` instead of raising; the exception type
    exists so the gap can be logged and reported uniformly.
    """

    def __init__(self, message: str = "Plan configuration is incomplete"):
        """Create a new ConfigurationGapError instance."""
        self.message = message
        super().__init__(message)
