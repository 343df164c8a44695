"""Tenant domain fakes."""

from plangate.domains.tenants.fakes.repository import FakeTenantRepository

__all__ = ["FakeTenantRepository"]
