"""Domain events for the event bus."""

from plangate.core.events.base import DomainEvent
from plangate.core.events.billing import PaymentFailedEvent, SubscriptionLifecycleEvent
from plangate.core.events.enums import (
    BillingEventType,
    EventType,
    SubscriptionEventType,
    UsageEventType,
)
from plangate.core.events.usage import UsageMonthlySummaryEvent, UsageThresholdCrossedEvent

__all__ = [
    "BillingEventType",
    "DomainEvent",
    "EventType",
    "PaymentFailedEvent",
    "SubscriptionEventType",
    "SubscriptionLifecycleEvent",
    "UsageEventType",
    "UsageMonthlySummaryEvent",
    "UsageThresholdCrossedEvent",
]
