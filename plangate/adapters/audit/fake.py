"""Fake audit log for testing."""

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from plangate.core.protocols.audit import AuditLogProtocol


@dataclass
class AuditRecord:
    """Single recorded audit entry."""

    tenant_id: UUID
    action: str
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)


class FakeAuditLog(AuditLogProtocol):
    """In-memory spy implementing AuditLogProtocol."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    async def log(
        self,
        tenant_id: UUID,
        action: str,
        description: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self.records.append(AuditRecord(tenant_id, action, description, dict(metadata or {})))

    def for_action(self, action: str) -> list[AuditRecord]:
        """Records with the given action."""
        return [r for r in self.records if r.action == action]
