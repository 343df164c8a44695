"""Core protocols for dependency injection.

Cross-cutting infrastructure protocols. Domain-specific protocols live in
their respective domains/<name>/protocols.py modules.
"""

from plangate.core.protocols.audit import AuditLogProtocol
from plangate.core.protocols.cache import CacheBackend
from plangate.core.protocols.event_bus import DomainEvent, EventBus, EventHandler
from plangate.core.protocols.metrics import BillingMetrics
from plangate.core.protocols.payment import PaymentGatewayProtocol

__all__ = [
    "AuditLogProtocol",
    "BillingMetrics",
    "CacheBackend",
    "DomainEvent",
    "EventBus",
    "EventHandler",
    "PaymentGatewayProtocol",
]
