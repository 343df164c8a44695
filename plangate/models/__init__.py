"""Models for the application."""

from .billing_event import BillingEvent
from .plan import Plan
from .processed_event import ProcessedEvent
from .subscription import Subscription
from .tenant import Tenant
from .usage_ledger import UsageLedgerRow

__all__ = [
    "BillingEvent",
    "Plan",
    "ProcessedEvent",
    "Subscription",
    "Tenant",
    "UsageLedgerRow",
]
