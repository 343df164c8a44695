"""Usage domain types and pure business logic.

Constants, value objects, and pure functions used by the counter store,
the enforcement gate and the reconciliation jobs. No IO.
"""

import math
from dataclasses import dataclass
from typing import Optional

# Percentages of the limit that raise a one-shot notification per month.
THRESHOLD_PERCENTAGES: tuple[int, ...] = (80, 100)

DEFAULT_UPGRADE_SUGGESTION = (
    "Upgrade your subscription plan to increase the allowed {metric} limit."
)


@dataclass(frozen=True)
class EnforceOptions:
    """Per-call enforcement tuning."""

    grace_percentage: float = 0
    upgrade_suggestions: Optional[tuple[str, ...]] = None
    upgrade_url: Optional[str] = None


@dataclass(frozen=True)
class LimitRequirement:
    """What a request handler consumes: *amount* units of *metric*.

    Declared once next to the route and handed to ``require_limit``.
    """

    metric: str
    amount: int = 1
    grace_percentage: float = 0
    upgrade_url: Optional[str] = None

    def options(self) -> EnforceOptions:
        """Enforcement options derived from this requirement."""
        return EnforceOptions(
            grace_percentage=self.grace_percentage,
            upgrade_url=self.upgrade_url,
        )


@dataclass(frozen=True)
class LimitCheckResult:
    """Structured allow/deny answer for advisory callers (e.g. "4 of 5 used")."""

    metric: str
    current_usage: int
    limit: Optional[int]
    remaining: Optional[int]
    allowed: bool


def effective_limit(limit: float, grace_percentage: float = 0) -> int:
    """Limit after grace tolerance: ``floor(limit * (1 + grace/100))``.

    >>> effective_limit(100, 10)
    110
    """
    if grace_percentage and grace_percentage > 0:
        return math.floor(limit * (1 + grace_percentage / 100))
    return math.floor(limit)


def usage_percentage(usage: int, limit: float) -> float:
    """Usage as a percentage of limit (0 when the limit is not positive)."""
    if limit <= 0:
        return 0.0
    return usage / limit * 100


def crossed_thresholds(usage: int, limit: Optional[float]) -> list[int]:
    """Thresholds in THRESHOLD_PERCENTAGES that *usage* has reached."""
    if limit is None or limit <= 0:
        return []
    pct = usage_percentage(usage, limit)
    return [t for t in THRESHOLD_PERCENTAGES if pct >= t]


def parse_counter(raw: Optional[str]) -> int:
    """Interpret a raw cached counter. Absent or garbage means zero usage."""
    if raw is None:
        return 0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, int(value))
