"""Plan schemas."""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PlanCreate(BaseModel):
    """Payload for creating a plan."""

    name: str
    price_ref: Optional[str] = None
    product_ref: Optional[str] = None
    interval: Optional[str] = None
    limits: dict[str, int | float] = Field(default_factory=dict)
    tenant_id: Optional[UUID] = None
    is_active: bool = True
    manual_invoicing: bool = False
    metadata: Optional[dict[str, Any]] = None


class PlanUpdate(BaseModel):
    """Partial plan update; unset fields are left untouched."""

    name: Optional[str] = None
    price_ref: Optional[str] = None
    product_ref: Optional[str] = None
    interval: Optional[str] = None
    limits: Optional[dict[str, int | float]] = None
    tenant_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    manual_invoicing: Optional[bool] = None
    metadata: Optional[dict[str, Any]] = None


class PlanRead(BaseModel):
    """Plan as returned by the admin endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    price_ref: Optional[str] = None
    product_ref: Optional[str] = None
    interval: Optional[str] = None
    limits: dict[str, int | float] = Field(default_factory=dict)
    tenant_id: Optional[UUID] = None
    is_active: bool
    manual_invoicing: bool
    metadata: Optional[dict[str, Any]] = Field(None, validation_alias="plan_metadata")
