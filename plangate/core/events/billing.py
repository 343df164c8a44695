"""Domain events emitted while processing payment-provider webhooks."""

from typing import Optional

from plangate.core.events.base import DomainEvent
from plangate.core.events.enums import BillingEventType, SubscriptionEventType


class SubscriptionLifecycleEvent(DomainEvent):
    """A tenant's subscription was created or changed.

    ``subscription.created`` is only emitted for a new paid subscription;
    ``subscription.changed`` follows every checkout completion.
    """

    event_type: SubscriptionEventType

    plan: str
    previous_plan: Optional[str] = None
    status: str
    previous_status: Optional[str] = None
    customer_ref: Optional[str] = None
    subscription_ref: Optional[str] = None
    user_id: Optional[str] = None
    external_event_id: Optional[str] = None


class PaymentFailedEvent(DomainEvent):
    """An invoice payment failed for the tenant's subscription."""

    event_type: BillingEventType = BillingEventType.PAYMENT_FAILED

    customer_ref: Optional[str] = None
    subscription_ref: Optional[str] = None
    invoice_ref: Optional[str] = None
    external_event_id: Optional[str] = None
