"""Append-only usage events (threshold crossings, monthly summaries, deltas)."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base


class BillingEvent(Base):
    """Usage event row. Never updated or deleted."""

    __tablename__ = "billing_events"

    tenant_id: Mapped[UUID] = mapped_column(nullable=False)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    metric_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    increment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    event_metadata: Mapped[Optional[dict]] = mapped_column("metadata", JSONB, nullable=True)

    __table_args__ = (
        Index("idx_billing_events_tenant_type_metric", "tenant_id", "event_type", "metric_name"),
    )
