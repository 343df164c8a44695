"""Usage domain exceptions."""

from typing import Any, Optional

from plangate.core.exceptions import InvalidStateError

LIMIT_EXCEEDED_CODE = "PLAN_LIMIT_EXCEEDED"
LIMIT_EXCEEDED_MESSAGE = "Plan limit exceeded for this resource."


class LimitExceededError(InvalidStateError):
    """Raised when admitting a request would exceed the tenant's plan limit.

    The only enforcement failure that reaches end users; carries what they
    need to act on it.
    """

    def __init__(
        self,
        metric: str,
        current_usage: int,
        limit: int,
        requested_amount: int,
        remaining: int,
        effective_limit: Optional[int] = None,
        upgrade_suggestions: Optional[list[str]] = None,
        upgrade_url: Optional[str] = None,
    ) -> None:
        """Initialize with the limit breakdown and remediation hints."""
        self.metric = metric
        self.current_usage = current_usage
        self.limit = limit
        self.requested_amount = requested_amount
        self.remaining = remaining
        self.effective_limit = effective_limit if effective_limit is not None else limit
        self.upgrade_suggestions = list(upgrade_suggestions or [])
        self.upgrade_url = upgrade_url
        super().__init__(
            f"Usage limit exceeded for {metric}: {current_usage}+{requested_amount}"
            f" > {self.effective_limit}"
        )

    def to_detail(self) -> dict[str, Any]:
        """Body for a 402 response."""
        return {
            "message": LIMIT_EXCEEDED_MESSAGE,
            "code": LIMIT_EXCEEDED_CODE,
            "details": {
                "metric": self.metric,
                "currentUsage": self.current_usage,
                "limit": self.limit,
                "effectiveLimit": self.effective_limit,
                "requestedAmount": self.requested_amount,
                "remaining": self.remaining,
                "upgradeSuggestions": self.upgrade_suggestions,
                "upgradeUrl": self.upgrade_url,
            },
        }
