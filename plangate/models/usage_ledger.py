"""Durable daily usage snapshots."""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import Date, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base


class UsageLedgerRow(Base):
    """One row per (tenant, metric, day)."""

    __tablename__ = "usage_ledger"

    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    metric_name: Mapped[str] = mapped_column(String(100), nullable=False)
    period_date: Mapped[date] = mapped_column(Date, nullable=False)
    current_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_value: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "metric_name", "period_date", name="uq_usage_ledger_tenant_metric_day"
        ),
    )
