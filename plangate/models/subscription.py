"""Subscription model: one row per tenant, mirrored from the payment provider."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base
from plangate.schemas.billing import BillingPlan, SubscriptionStatus


class Subscription(Base):
    """Subscription model."""

    __tablename__ = "subscriptions"

    tenant_id: Mapped[UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    plan: Mapped[str] = mapped_column(String(20), nullable=False, default=BillingPlan.FREE.value)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatus.NONE.value
    )
    customer_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    subscription_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    transaction_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    cancellation_effective_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
