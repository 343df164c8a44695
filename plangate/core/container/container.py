"""Dependency Injection Container.

The container is a simple immutable dataclass that holds protocol implementations.
It has no construction logic; that belongs in the factory.

Design principles:
- Container serves, factory builds
- Fail fast: all construction at startup
- Type safety: fields are protocol types
- Testing: construct directly with fakes
"""

from dataclasses import dataclass, replace
from typing import Any

from plangate.core.protocols import (
    AuditLogProtocol,
    BillingMetrics,
    CacheBackend,
    EventBus,
    PaymentGatewayProtocol,
)
from plangate.domains.billing.protocols import BillingWebhookProtocol
from plangate.domains.billing.repository import (
    ProcessedEventRepositoryProtocol,
    SubscriptionRepositoryProtocol,
)
from plangate.domains.plans.protocols import PlanLimitResolverProtocol, PlanServiceProtocol
from plangate.domains.plans.repository import PlanRepositoryProtocol
from plangate.domains.reconciliation.protocols import ReconciliationJobProtocol
from plangate.domains.tenants.protocols import TenantRepositoryProtocol
from plangate.domains.usage.limit_gate import CacheLimitGuard
from plangate.domains.usage.protocols import (
    LimitEnforcementGateProtocol,
    UsageCounterStoreProtocol,
    UsageLedgerProtocol,
)
from plangate.domains.usage.repository import (
    UsageEventRepositoryProtocol,
    UsageLedgerRepositoryProtocol,
)


@dataclass(frozen=True)
class Container:
    """Immutable container holding all protocol implementations.

    Usage:
        # Production: use the global container built by factory
        from plangate.core.container import container
        await container.limit_gate.enforce(db, tenant_id, "api_calls", 1)

        # Testing: construct directly with fakes
        test_container = Container(event_bus=FakeEventBus(), ...)

        # FastAPI endpoints: use the deps in plangate.api.deps
        async def my_endpoint(gate=Inject(LimitEnforcementGateProtocol)):
    """

    # Event bus for domain event fan-out
    event_bus: EventBus

    # Cache behind the live usage counters
    cache: CacheBackend

    # Billing / enforcement / reconciliation counters
    metrics: BillingMetrics

    # Payment provider (Stripe when enabled, Null otherwise)
    payment_gateway: PaymentGatewayProtocol

    # Audit trail
    audit_log: AuditLogProtocol

    # Repositories
    tenant_repo: TenantRepositoryProtocol
    plan_repo: PlanRepositoryProtocol
    subscription_repo: SubscriptionRepositoryProtocol
    processed_event_repo: ProcessedEventRepositoryProtocol
    usage_ledger_repo: UsageLedgerRepositoryProtocol
    usage_event_repo: UsageEventRepositoryProtocol

    # Usage metering and enforcement
    counter_store: UsageCounterStoreProtocol
    plan_resolver: PlanLimitResolverProtocol
    plan_service: PlanServiceProtocol
    limit_gate: LimitEnforcementGateProtocol
    cache_limit_guard: CacheLimitGuard
    usage_ledger: UsageLedgerProtocol

    # Payment-provider webhooks
    billing_webhook: BillingWebhookProtocol

    # Reconciliation jobs (run by the Temporal worker)
    daily_snapshot_job: ReconciliationJobProtocol
    monthly_reset_job: ReconciliationJobProtocol

    # -----------------------------------------------------------------
    # Convenience methods
    # -----------------------------------------------------------------

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Useful for partial overrides in tests:

            modified = container.replace(limit_gate=FakeLimitEnforcementGate())

        Args:
            **changes: Dependency name -> new implementation

        Returns:
            New Container with specified dependencies replaced
        """
        return replace(self, **changes)
