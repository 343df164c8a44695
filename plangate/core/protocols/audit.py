"""Audit log protocol.

Audit storage is owned elsewhere; this package only records entries.
"""

from typing import Any, Optional, Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class AuditLogProtocol(Protocol):
    """Append-only audit trail for tenant-visible billing changes."""

    async def log(
        self,
        tenant_id: UUID,
        action: str,
        description: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an audit entry."""
        ...
