"""Tenant model (owned by the tenant service; read-only here)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base
from plangate.schemas.tenant import TenantStatus


class Tenant(Base):
    """Tenant model."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )
