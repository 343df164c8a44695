"""Plans domain types and pure business logic."""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from plangate.domains.plans.exceptions import InvalidPlanLimitsError
from plangate.schemas.billing import BillingPlan

# Sparse metric -> ceiling map. A missing key means unlimited.
PlanLimits = dict[str, int | float]


def assert_valid_plan_limits(limits: Optional[Mapping[str, Any]]) -> None:
    """Raise InvalidPlanLimitsError unless every present value is finite and >= 0.

    ``None`` values are treated as absent.
    """
    if not limits:
        return
    for key, value in limits.items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidPlanLimitsError(key, value)
        if not math.isfinite(value) or value < 0:
            raise InvalidPlanLimitsError(key, value)


def limit_for(limits: Optional[Mapping[str, Any]], metric: str) -> Optional[int | float]:
    """Ceiling for *metric*, or None when unlimited (or limits unresolved)."""
    if not limits:
        return None
    return limits.get(metric)


@dataclass(frozen=True)
class PlanPriceConfig:
    """Explicit plan -> provider price mapping.

    Built once from settings by the container factory and injected into
    the resolver.
    """

    free: Optional[str] = None
    starter: Optional[str] = None
    growth: Optional[str] = None
    enterprise: Optional[str] = None

    def price_for(self, plan: BillingPlan) -> Optional[str]:
        """Price reference for *plan*, or None when not configured."""
        return getattr(self, plan.value, None) or None

    @classmethod
    def from_settings(cls, settings: Any) -> "PlanPriceConfig":
        """Read the ``PLAN_PRICE_*`` settings."""
        return cls(
            free=settings.PLAN_PRICE_FREE,
            starter=settings.PLAN_PRICE_STARTER,
            growth=settings.PLAN_PRICE_GROWTH,
            enterprise=settings.PLAN_PRICE_ENTERPRISE,
        )
