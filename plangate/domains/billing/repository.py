"""Billing domain repositories wrapping crud.subscription and crud.processed_event."""

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate import crud
from plangate.models.subscription import Subscription
from plangate.schemas.billing import BillingPlan, SubscriptionStatus


class SubscriptionRepositoryProtocol(Protocol):
    """Data access for tenant subscription rows."""

    async def get_by_tenant(self, db: AsyncSession, tenant_id: UUID) -> Optional[Subscription]:
        """Get the tenant's subscription row."""
        ...

    async def get_by_subscription_ref(
        self, db: AsyncSession, subscription_ref: str
    ) -> Optional[Subscription]:
        """Get a subscription row by provider subscription id."""
        ...

    async def get_by_customer_ref(
        self, db: AsyncSession, customer_ref: str
    ) -> Optional[Subscription]:
        """Get a subscription row by provider customer id."""
        ...

    async def create(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        plan: BillingPlan = BillingPlan.FREE,
        status: SubscriptionStatus = SubscriptionStatus.NONE,
    ) -> Subscription:
        """Create the tenant's subscription row (defaults: free / none)."""
        ...

    async def save(self, db: AsyncSession, subscription: Subscription) -> Subscription:
        """Stage changes to a subscription row."""
        ...


class ProcessedEventRepositoryProtocol(Protocol):
    """Markers recording which external events were applied."""

    async def try_claim(self, db: AsyncSession, event_id: str, consumer_name: str) -> bool:
        """Insert the marker; False when it already existed."""
        ...

    async def purge_older_than(self, db: AsyncSession, cutoff: datetime) -> int:
        """Delete markers older than *cutoff*."""
        ...


class SubscriptionRepository(SubscriptionRepositoryProtocol):
    """Delegates to the crud.subscription singleton."""

    async def get_by_tenant(self, db: AsyncSession, tenant_id: UUID) -> Optional[Subscription]:
        """Get the tenant's subscription row."""
        return await crud.subscription.get_by_tenant(db, tenant_id=tenant_id)

    async def get_by_subscription_ref(
        self, db: AsyncSession, subscription_ref: str
    ) -> Optional[Subscription]:
        """Get a subscription row by provider subscription id."""
        return await crud.subscription.get_by_subscription_ref(
            db, subscription_ref=subscription_ref
        )

    async def get_by_customer_ref(
        self, db: AsyncSession, customer_ref: str
    ) -> Optional[Subscription]:
        """Get a subscription row by provider customer id."""
        return await crud.subscription.get_by_customer_ref(db, customer_ref=customer_ref)

    async def create(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        plan: BillingPlan = BillingPlan.FREE,
        status: SubscriptionStatus = SubscriptionStatus.NONE,
    ) -> Subscription:
        """Create the tenant's subscription row."""
        return await crud.subscription.create(
            db, tenant_id=tenant_id, plan=plan.value, status=status.value
        )

    async def save(self, db: AsyncSession, subscription: Subscription) -> Subscription:
        """Stage changes to a subscription row."""
        return await crud.subscription.save(db, subscription)


class ProcessedEventRepository(ProcessedEventRepositoryProtocol):
    """Delegates to the crud.processed_event singleton."""

    async def try_claim(self, db: AsyncSession, event_id: str, consumer_name: str) -> bool:
        """Insert the marker; False when it already existed."""
        return await crud.processed_event.try_claim(
            db, event_id=event_id, consumer_name=consumer_name
        )

    async def purge_older_than(self, db: AsyncSession, cutoff: datetime) -> int:
        """Delete markers older than *cutoff*."""
        return await crud.processed_event.purge_older_than(db, cutoff=cutoff)
