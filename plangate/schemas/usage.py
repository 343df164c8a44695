"""Usage summary schemas returned to tenant-facing callers."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from plangate.schemas.billing import BillingPlan


class UsageHistoryPoint(BaseModel):
    """Ledger value for one day."""

    period_date: date
    usage: int


class UsageMetricSummary(BaseModel):
    """Current standing of one metric against its plan limit."""

    metric: str
    current_usage: int = 0
    limit: Optional[int] = Field(None, description="None means unlimited")
    percentage_used: Optional[float] = Field(None, ge=0.0, le=100.0)
    history: list[UsageHistoryPoint] = Field(default_factory=list)


class UsageSummary(BaseModel):
    """Plan plus per-metric usage for a tenant."""

    plan: BillingPlan
    metrics: list[UsageMetricSummary] = Field(default_factory=list)


class UsageChange(BaseModel):
    """Tenant-originated usage write."""

    amount: int = Field(1, ge=1)


class UsageChangeResult(BaseModel):
    """Counter and ledger values after a usage write."""

    metric: str
    usage: int = Field(..., description="Live counter for the current month")
    ledger_usage: int = Field(..., description="Today's ledger row")


class LimitCheck(BaseModel):
    """Advisory allow/deny answer, e.g. to render "4 of 5 used"."""

    metric: str
    current_usage: int
    limit: Optional[int] = None
    remaining: Optional[int] = None
    allowed: bool


class UsageLimitOverride(BaseModel):
    """Cache-level limit for one metric; ``None`` removes the override."""

    limit: Optional[int] = Field(None, ge=0)
