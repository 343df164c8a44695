"""Subscription enums."""

from enum import Enum


class BillingPlan(str, Enum):
    """Subscription tier recorded on the tenant's subscription row."""

    FREE = "free"
    STARTER = "starter"
    GROWTH = "growth"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    """Payment-provider subscription status."""

    NONE = "none"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
