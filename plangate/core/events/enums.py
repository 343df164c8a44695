"""Event type enums, the vocabulary of the event bus.

Every domain event must use one of these enums for its event_type field.
The union `EventType` constrains DomainEvent.event_type to known values.
"""

from enum import Enum


class UsageEventType(str, Enum):
    """Usage metering event types.

    The same values are stored as ``billing_events.event_type`` rows.
    """

    THRESHOLD_CROSSED = "usage.threshold_crossed"
    MONTHLY_SUMMARY = "usage.monthly_summary"
    DELTA = "usage.delta"


class SubscriptionEventType(str, Enum):
    """Subscription lifecycle event types."""

    CREATED = "subscription.created"
    CHANGED = "subscription.changed"


class BillingEventType(str, Enum):
    """Payment-provider driven billing event types."""

    PAYMENT_FAILED = "billing.payment_failed"


EventType = UsageEventType | SubscriptionEventType | BillingEventType

ALL_EVENT_TYPE_ENUMS: list[type[Enum]] = [
    UsageEventType,
    SubscriptionEventType,
    BillingEventType,
]
