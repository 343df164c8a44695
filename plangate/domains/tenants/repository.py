"""Tenant repository wrapping crud.tenant."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate import crud
from plangate.domains.tenants.protocols import TenantRepositoryProtocol


class TenantRepository(TenantRepositoryProtocol):
    """Delegates to the crud.tenant singleton."""

    async def list_active_tenant_ids(self, db: AsyncSession) -> list[UUID]:
        """Return the ids of all active tenants."""
        return await crud.tenant.list_active_ids(db)
