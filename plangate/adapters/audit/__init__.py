"""Audit log adapters."""

from plangate.adapters.audit.fake import FakeAuditLog
from plangate.adapters.audit.logging import LoggingAuditLog

__all__ = ["FakeAuditLog", "LoggingAuditLog"]
