"""Pydantic schemas and shared enums."""

from plangate.schemas.billing import BillingPlan, SubscriptionStatus
from plangate.schemas.plan import PlanCreate, PlanRead, PlanUpdate
from plangate.schemas.tenant import TenantStatus
from plangate.schemas.usage import (
    LimitCheck,
    UsageChange,
    UsageChangeResult,
    UsageHistoryPoint,
    UsageLimitOverride,
    UsageMetricSummary,
    UsageSummary,
)

__all__ = [
    "BillingPlan",
    "LimitCheck",
    "PlanCreate",
    "PlanRead",
    "PlanUpdate",
    "SubscriptionStatus",
    "TenantStatus",
    "UsageChange",
    "UsageChangeResult",
    "UsageHistoryPoint",
    "UsageLimitOverride",
    "UsageMetricSummary",
    "UsageSummary",
]
