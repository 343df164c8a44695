"""Tenant domain protocols."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class TenantRepositoryProtocol(Protocol):
    """Read access to tenants. Tenant CRUD is owned by the tenant service."""

    async def list_active_tenant_ids(self, db: AsyncSession) -> list[UUID]:
        """Return the ids of all active tenants."""
        ...
