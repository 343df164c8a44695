"""Webhook processor for Stripe billing events.

Every delivery is applied at most once per consumer: a processed-event
marker is claimed inside the same transaction as the handler's effects,
so the marker and the subscription change commit (or roll back) together.
Domain events are collected while handling and published only after the
commit succeeded.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.datetime_utils import utc_now
from plangate.core.events import (
    PaymentFailedEvent,
    SubscriptionEventType,
    SubscriptionLifecycleEvent,
)
from plangate.core.logging import ContextualLogger, logger
from plangate.core.protocols.audit import AuditLogProtocol
from plangate.core.protocols.event_bus import DomainEvent, EventBus
from plangate.core.protocols.metrics import BillingMetrics
from plangate.core.protocols.payment import PaymentGatewayProtocol
from plangate.domains.billing.exceptions import (
    MalformedExternalEventError,
    WebhookSignatureError,
)
from plangate.domains.billing.protocols import BillingWebhookProtocol
from plangate.domains.billing.repository import (
    ProcessedEventRepositoryProtocol,
    SubscriptionRepositoryProtocol,
)
from plangate.schemas.billing import BillingPlan, SubscriptionStatus

CONSUMER_NAME = "stripe-webhook"
AUDIT_SUBSCRIPTION_UPDATED = "subscription.updated"

_Handler = Callable[[AsyncSession, Any, list, ContextualLogger], Awaitable[None]]


def _ref(value: Any) -> Optional[str]:
    """Provider reference from either an id string or an expanded object."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return getattr(value, "id", None)


class BillingWebhookProcessor(BillingWebhookProtocol):
    """Process Stripe webhook events for billing."""

    def __init__(
        self,
        payment_gateway: PaymentGatewayProtocol,
        subscription_repo: SubscriptionRepositoryProtocol,
        processed_repo: ProcessedEventRepositoryProtocol,
        event_bus: EventBus,
        audit_log: AuditLogProtocol,
        metrics: BillingMetrics,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize with all required dependencies."""
        self._payment_gateway = payment_gateway
        self._subscription_repo = subscription_repo
        self._processed_repo = processed_repo
        self._event_bus = event_bus
        self._audit_log = audit_log
        self._metrics = metrics
        self._clock = clock

        self.handlers: dict[str, _Handler] = {
            "checkout.session.completed": self._handle_checkout_completed,
            "invoice.payment_succeeded": self._handle_payment_succeeded,
            "invoice.paid": self._handle_payment_succeeded,  # $0 invoices
            "invoice.payment_failed": self._handle_payment_failed,
            "customer.subscription.deleted": self._handle_subscription_deleted,
        }

    async def process_webhook(self, db: AsyncSession, payload: bytes, signature: str) -> None:
        """Verify webhook signature and process the resulting event.

        Raises WebhookSignatureError if the signature or payload is invalid.
        """
        try:
            event = self._payment_gateway.verify_webhook_signature(payload, signature)
        except WebhookSignatureError as e:
            logger.error(f"Failed to verify webhook event: {e}")
            self._metrics.inc_subscription_event("unknown", "error")
            raise
        await self.process_event(db, event)

    async def process_event(self, db: AsyncSession, event: Any) -> None:
        """Apply a verified event once, then publish the resulting domain events."""
        event_type = getattr(event, "type", None) or "unknown"
        event_id = getattr(event, "id", None)
        log = logger.with_context(event_type=event_type, external_event_id=event_id)

        pending: list[DomainEvent] = []
        result = "ok"
        try:
            if event_id:
                claimed = await self._processed_repo.try_claim(db, event_id, CONSUMER_NAME)
                if not claimed:
                    result = "duplicate"
                    log.info("Webhook event already processed, skipping")
                    await db.rollback()
                    return

            handler = self.handlers.get(event_type)
            if handler is None:
                log.debug(f"Ignoring unsupported webhook event type: {event_type}")
            else:
                log.info(f"Processing webhook event: {event_type}")
                try:
                    await handler(db, event, pending, log)
                except MalformedExternalEventError as e:
                    log.warning(f"Ignoring malformed webhook event: {e.message}")
                    pending.clear()

            await db.commit()
        except Exception as e:
            result = "error"
            log.error(f"Error handling {event_type}: {e}", exc_info=True)
            await db.rollback()
            raise
        finally:
            self._metrics.inc_subscription_event(event_type, result)

        for domain_event in pending:
            await self._event_bus.publish(domain_event)

    # Event handlers

    async def _handle_checkout_completed(
        self,
        db: AsyncSession,
        event: Any,
        pending: list,
        log: ContextualLogger,
    ) -> None:
        """Apply a completed checkout to the tenant's subscription row."""
        session = event.data.object
        metadata = getattr(session, "metadata", None) or {}
        tenant_raw = metadata.get("tenant_id")
        plan_raw = metadata.get("plan_id")
        user_id = metadata.get("user_id")

        if not tenant_raw or not plan_raw:
            raise MalformedExternalEventError(
                "checkout.session.completed missing tenant_id or plan_id metadata"
            )
        try:
            tenant_id = UUID(str(tenant_raw))
            plan = BillingPlan(plan_raw)
        except ValueError as e:
            raise MalformedExternalEventError(
                f"checkout.session.completed has invalid metadata: {e}"
            ) from e

        log = log.with_context(tenant_id=str(tenant_id))

        subscription = await self._subscription_repo.get_by_tenant(db, tenant_id)
        if subscription is None:
            subscription = await self._subscription_repo.create(db, tenant_id)

        previous_plan = subscription.plan
        previous_status = subscription.status
        previous_customer_ref = subscription.customer_ref
        previous_subscription_ref = subscription.subscription_ref

        subscription.customer_ref = _ref(getattr(session, "customer", None))
        if plan == BillingPlan.FREE:
            subscription.plan = BillingPlan.FREE.value
            subscription.status = SubscriptionStatus.NONE.value
            subscription.subscription_ref = None
        else:
            subscription.plan = plan.value
            subscription.status = SubscriptionStatus.ACTIVE.value
            subscription.subscription_ref = _ref(getattr(session, "subscription", None))

        payment_intent = _ref(getattr(session, "payment_intent", None))
        subscription.transaction_ref = payment_intent or subscription.transaction_ref

        await self._subscription_repo.save(db, subscription)
        log.info(
            f"Checkout completed: plan={subscription.plan}, status={subscription.status}, "
            f"customer={subscription.customer_ref}"
        )

        is_new_paid_subscription = (
            plan != BillingPlan.FREE
            and subscription.status == SubscriptionStatus.ACTIVE.value
            and (
                previous_status != SubscriptionStatus.ACTIVE.value
                or not previous_subscription_ref
            )
        )

        lifecycle = dict(
            tenant_id=tenant_id,
            plan=subscription.plan,
            previous_plan=previous_plan,
            status=subscription.status,
            previous_status=previous_status,
            customer_ref=subscription.customer_ref,
            subscription_ref=subscription.subscription_ref,
            user_id=user_id,
            external_event_id=event.id,
        )
        if is_new_paid_subscription:
            pending.append(
                SubscriptionLifecycleEvent(event_type=SubscriptionEventType.CREATED, **lifecycle)
            )
        pending.append(
            SubscriptionLifecycleEvent(event_type=SubscriptionEventType.CHANGED, **lifecycle)
        )

        await self._audit_log.log(
            tenant_id,
            AUDIT_SUBSCRIPTION_UPDATED,
            f"Subscription updated via checkout to plan {subscription.plan} "
            f"with status {subscription.status}",
            {
                "previous_plan": previous_plan,
                "previous_status": previous_status,
                "previous_customer_ref": previous_customer_ref,
                "previous_subscription_ref": previous_subscription_ref,
                "plan": subscription.plan,
                "status": subscription.status,
                "customer_ref": subscription.customer_ref,
                "subscription_ref": subscription.subscription_ref,
                "external_event_id": event.id,
                "checkout_session_id": getattr(session, "id", None),
                "user_id": user_id,
            },
        )

    async def _handle_payment_succeeded(
        self,
        db: AsyncSession,
        event: Any,
        pending: list,
        log: ContextualLogger,
    ) -> None:
        """Record the payment reference of a paid invoice."""
        invoice = event.data.object
        subscription_ref = _ref(getattr(invoice, "subscription", None))
        if not subscription_ref:
            log.warning(f"Invoice {getattr(invoice, 'id', None)} has no subscription reference")
            return

        subscription = await self._subscription_repo.get_by_subscription_ref(db, subscription_ref)
        if subscription is None:
            log.warning(f"No subscription found for {subscription_ref}")
            return

        payment_intent = _ref(getattr(invoice, "payment_intent", None))
        if payment_intent:
            subscription.transaction_ref = payment_intent
            await self._subscription_repo.save(db, subscription)

        log.with_context(tenant_id=str(subscription.tenant_id)).info(
            f"Invoice paid: subscription={subscription_ref}, payment_intent={payment_intent}"
        )

    async def _handle_payment_failed(
        self,
        db: AsyncSession,
        event: Any,
        pending: list,
        log: ContextualLogger,
    ) -> None:
        """Emit billing.payment_failed for the subscription behind the invoice."""
        invoice = event.data.object
        invoice_ref = getattr(invoice, "id", None)
        subscription_ref = _ref(getattr(invoice, "subscription", None))
        customer_ref = _ref(getattr(invoice, "customer", None))

        if not subscription_ref and not customer_ref:
            log.warning(f"Invoice {invoice_ref} has no subscription or customer reference")
            return

        subscription = None
        if subscription_ref:
            subscription = await self._subscription_repo.get_by_subscription_ref(
                db, subscription_ref
            )
        if subscription is None and customer_ref:
            subscription = await self._subscription_repo.get_by_customer_ref(db, customer_ref)
        if subscription is None:
            log.warning(
                f"No subscription found for subscription={subscription_ref}, "
                f"customer={customer_ref}"
            )
            return

        log.with_context(tenant_id=str(subscription.tenant_id)).warning(
            f"Invoice payment failed: invoice={invoice_ref}, subscription={subscription_ref}"
        )
        pending.append(
            PaymentFailedEvent(
                tenant_id=subscription.tenant_id,
                customer_ref=subscription.customer_ref,
                subscription_ref=subscription.subscription_ref,
                invoice_ref=invoice_ref,
                external_event_id=event.id,
            )
        )

    async def _handle_subscription_deleted(
        self,
        db: AsyncSession,
        event: Any,
        pending: list,
        log: ContextualLogger,
    ) -> None:
        """Mark the subscription canceled and detach it from the provider."""
        provider_subscription = event.data.object
        subscription_ref = getattr(provider_subscription, "id", None)

        subscription = None
        if subscription_ref:
            subscription = await self._subscription_repo.get_by_subscription_ref(
                db, subscription_ref
            )
        if subscription is None:
            log.warning(f"No subscription found for {subscription_ref}")
            return

        previous_plan = subscription.plan
        previous_status = subscription.status

        ended_at = getattr(provider_subscription, "ended_at", None)
        effective = (
            datetime.fromtimestamp(ended_at, tz=timezone.utc) if ended_at else self._clock()
        )

        subscription.status = SubscriptionStatus.CANCELED.value
        subscription.cancellation_effective_at = (
            subscription.cancellation_effective_at or effective
        )
        subscription.subscription_ref = None
        await self._subscription_repo.save(db, subscription)

        log.with_context(tenant_id=str(subscription.tenant_id)).info(
            f"Subscription {subscription_ref} deleted; status set to canceled"
        )

        await self._audit_log.log(
            subscription.tenant_id,
            AUDIT_SUBSCRIPTION_UPDATED,
            f"Subscription {subscription_ref} expired or was cancelled; "
            f"status updated to {subscription.status}",
            {
                "previous_plan": previous_plan,
                "previous_status": previous_status,
                "plan": subscription.plan,
                "status": subscription.status,
                "subscription_ref": subscription_ref,
                "cancellation_effective_at": subscription.cancellation_effective_at.isoformat(),
                "external_event_id": event.id,
            },
        )
