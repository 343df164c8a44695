"""Fake tenant repository for testing."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession


class FakeTenantRepository:
    """In-memory fake for TenantRepositoryProtocol."""

    def __init__(self, active: list[UUID] | None = None) -> None:
        """Initialize with an optional list of active tenant ids."""
        self._active: list[UUID] = list(active or [])

    def seed(self, *tenant_ids: UUID) -> None:
        """Add active tenants."""
        self._active.extend(tenant_ids)

    async def list_active_tenant_ids(self, db: AsyncSession) -> list[UUID]:
        """Return the seeded tenant ids."""
        return list(self._active)
