"""Tenant enums."""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status. Only active tenants are reconciled."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"
