"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container with environment-appropriate implementations.

Design principles:
- Single place for all wiring decisions
- Fail fast: broken wiring crashes at startup, not at 3am
- Testable: can unit test factory logic with mock settings
"""

from prometheus_client import CollectorRegistry

from plangate.adapters.audit.logging import LoggingAuditLog
from plangate.adapters.cache.redis import RedisCacheBackend
from plangate.adapters.event_bus.in_memory import InMemoryEventBus
from plangate.adapters.metrics import PrometheusBillingMetrics
from plangate.core.config import Settings
from plangate.core.container.container import Container
from plangate.core.logging import logger
from plangate.core.protocols.payment import PaymentGatewayProtocol
from plangate.core.redis_client import redis_client
from plangate.db.session import get_db_context
from plangate.domains.billing.repository import (
    ProcessedEventRepository,
    SubscriptionRepository,
)
from plangate.domains.billing.webhook_processor import BillingWebhookProcessor
from plangate.domains.plans.repository import PlanRepository
from plangate.domains.plans.resolver import PlanLimitResolver
from plangate.domains.plans.service import PlanService
from plangate.domains.plans.types import PlanPriceConfig
from plangate.domains.reconciliation.daily_snapshot import DailyUsageSnapshotJob
from plangate.domains.reconciliation.monthly_reset import MonthlyUsageResetJob
from plangate.domains.tenants.repository import TenantRepository
from plangate.domains.usage.counter_store import UsageCounterStore
from plangate.domains.usage.ledger import UsageLedger
from plangate.domains.usage.limit_gate import CacheLimitGuard, LimitEnforcementGate
from plangate.domains.usage.repository import UsageEventRepository, UsageLedgerRepository


def create_container(settings: Settings) -> Container:
    """Build container with environment-appropriate implementations.

    This is the single place where we decide which adapter implements each protocol.

    Args:
        settings: Application settings

    Returns:
        Fully constructed Container ready for use
    """
    event_bus = InMemoryEventBus()
    metrics = PrometheusBillingMetrics(registry=CollectorRegistry())
    cache = RedisCacheBackend(redis_client.client)
    payment_gateway = _create_payment_gateway(settings)
    audit_log = LoggingAuditLog()

    tenant_repo = TenantRepository()
    plan_repo = PlanRepository()
    subscription_repo = SubscriptionRepository()
    processed_event_repo = ProcessedEventRepository()
    usage_ledger_repo = UsageLedgerRepository()
    usage_event_repo = UsageEventRepository()

    counter_store = UsageCounterStore(
        cache,
        counter_ttl_seconds=settings.USAGE_COUNTER_TTL_SECONDS,
        threshold_ttl_seconds=settings.USAGE_THRESHOLD_TTL_SECONDS,
    )
    plan_resolver = PlanLimitResolver(
        plan_repo=plan_repo,
        subscription_repo=subscription_repo,
        counter_store=counter_store,
        price_config=PlanPriceConfig.from_settings(settings),
    )
    usage_ledger = UsageLedger(usage_ledger_repo, usage_event_repo, plan_resolver)

    billing_webhook = BillingWebhookProcessor(
        payment_gateway=payment_gateway,
        subscription_repo=subscription_repo,
        processed_repo=processed_event_repo,
        event_bus=event_bus,
        audit_log=audit_log,
        metrics=metrics,
    )

    job_deps = dict(
        session_factory=get_db_context,
        tenant_repo=tenant_repo,
        counter_store=counter_store,
        ledger=usage_ledger,
        event_repo=usage_event_repo,
        resolver=plan_resolver,
        event_bus=event_bus,
        metrics=metrics,
        tenant_timeout_seconds=settings.RECONCILIATION_TENANT_TIMEOUT_SECONDS,
    )

    logger.debug(f"Container built for environment {settings.ENVIRONMENT.value}")

    return Container(
        event_bus=event_bus,
        cache=cache,
        metrics=metrics,
        payment_gateway=payment_gateway,
        audit_log=audit_log,
        tenant_repo=tenant_repo,
        plan_repo=plan_repo,
        subscription_repo=subscription_repo,
        processed_event_repo=processed_event_repo,
        usage_ledger_repo=usage_ledger_repo,
        usage_event_repo=usage_event_repo,
        counter_store=counter_store,
        plan_resolver=plan_resolver,
        plan_service=PlanService(plan_repo),
        limit_gate=LimitEnforcementGate(plan_resolver, counter_store, metrics),
        cache_limit_guard=CacheLimitGuard(counter_store),
        usage_ledger=usage_ledger,
        billing_webhook=billing_webhook,
        daily_snapshot_job=DailyUsageSnapshotJob(**job_deps),
        monthly_reset_job=MonthlyUsageResetJob(**job_deps),
    )


# ---------------------------------------------------------------------------
# Private factory functions
# ---------------------------------------------------------------------------


def _create_payment_gateway(settings: Settings) -> PaymentGatewayProtocol:
    """Create payment gateway: Stripe if enabled, otherwise a null implementation."""
    if settings.STRIPE_ENABLED:
        from plangate.adapters.payment.stripe import StripePaymentGateway

        return StripePaymentGateway(
            api_key=settings.STRIPE_SECRET_KEY,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        )

    from plangate.adapters.payment.null import NullPaymentGateway

    return NullPaymentGateway()
