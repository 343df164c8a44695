"""Plan model: limits for a shared price or a tenant's manual agreement."""

from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base


class Plan(Base):
    """Plan model.

    Shared plans (``tenant_id`` NULL) are linked to a provider price.
    Manual-invoicing plans are scoped to exactly one tenant.
    """

    __tablename__ = "plans"

    name: Mapped[str] = mapped_column(String, nullable=False)
    price_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    product_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    interval: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    limits: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    tenant_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    manual_invoicing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    plan_metadata: Mapped[Optional[dict]] = mapped_column("metadata", JSONB, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "NOT manual_invoicing OR tenant_id IS NOT NULL",
            name="ck_plans_manual_invoicing_requires_tenant",
        ),
        Index("idx_plans_price_ref_active", "price_ref", "is_active"),
        Index("idx_plans_tenant_manual", "tenant_id", "manual_invoicing", "is_active"),
    )
