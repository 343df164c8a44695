"""Audit log adapter that writes structured log lines.

The audit store itself is external; shipping these lines (JSON outside
local development) is the integration point.
"""

from typing import Any, Optional
from uuid import UUID

from plangate.core.logging import logger
from plangate.core.protocols.audit import AuditLogProtocol


class LoggingAuditLog(AuditLogProtocol):
    """Emit one ``audit`` log line per entry."""

    def __init__(self) -> None:
        self._log = logger.with_context(component="audit")

    async def log(
        self,
        tenant_id: UUID,
        action: str,
        description: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self._log.with_context(
            event_type="audit",
            tenant_id=str(tenant_id),
            audit_action=action,
            audit_metadata=metadata or {},
        ).info(description)
