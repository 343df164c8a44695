"""CRUD singletons, one per model."""

from .crud_billing_event import billing_event
from .crud_plan import plan
from .crud_processed_event import processed_event
from .crud_subscription import subscription
from .crud_tenant import tenant
from .crud_usage_ledger import usage_ledger

__all__ = [
    "billing_event",
    "plan",
    "processed_event",
    "subscription",
    "tenant",
    "usage_ledger",
]
