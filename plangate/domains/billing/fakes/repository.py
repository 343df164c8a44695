"""Fake billing repositories for testing."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.models.subscription import Subscription
from plangate.schemas.billing import BillingPlan, SubscriptionStatus


class FakeSubscriptionRepository:
    """In-memory fake for SubscriptionRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty in-memory store."""
        self._by_tenant: dict[UUID, Subscription] = {}
        self._calls: list[tuple] = []

    def seed(self, subscription: Subscription) -> Subscription:
        """Store a subscription row."""
        self._by_tenant[subscription.tenant_id] = subscription
        return subscription

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    async def get_by_tenant(self, db: AsyncSession, tenant_id: UUID) -> Optional[Subscription]:
        self._calls.append(("get_by_tenant", tenant_id))
        return self._by_tenant.get(tenant_id)

    async def get_by_subscription_ref(
        self, db: AsyncSession, subscription_ref: str
    ) -> Optional[Subscription]:
        self._calls.append(("get_by_subscription_ref", subscription_ref))
        return next(
            (s for s in self._by_tenant.values() if s.subscription_ref == subscription_ref),
            None,
        )

    async def get_by_customer_ref(
        self, db: AsyncSession, customer_ref: str
    ) -> Optional[Subscription]:
        self._calls.append(("get_by_customer_ref", customer_ref))
        return next(
            (s for s in self._by_tenant.values() if s.customer_ref == customer_ref),
            None,
        )

    async def create(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        plan: BillingPlan = BillingPlan.FREE,
        status: SubscriptionStatus = SubscriptionStatus.NONE,
    ) -> Subscription:
        self._calls.append(("create", tenant_id))
        now = datetime.now(timezone.utc)
        subscription = Subscription(
            id=uuid4(),
            created_at=now,
            modified_at=now,
            tenant_id=tenant_id,
            plan=plan.value,
            status=status.value,
        )
        return self.seed(subscription)

    async def save(self, db: AsyncSession, subscription: Subscription) -> Subscription:
        self._calls.append(("save", subscription.tenant_id))
        return self.seed(subscription)


class FakeProcessedEventRepository:
    """In-memory fake for ProcessedEventRepositoryProtocol.

    Claims are tied to the session that made them. ``commit(db)`` and
    ``rollback(db)`` mirror the session outcome: a rolled-back claim
    disappears like the uncommitted INSERT it stands for. Tests that never
    call them see every claim as committed.
    """

    def __init__(self) -> None:
        """Initialize empty marker store."""
        self.markers: dict[tuple[str, str], datetime] = {}
        self._pending: dict[int, list[tuple[str, str]]] = {}
        self._calls: list[tuple] = []

    def seed(self, event_id: str, consumer_name: str, at: Optional[datetime] = None) -> None:
        """Pretend an event was already processed."""
        self.markers[(event_id, consumer_name)] = at or datetime.now(timezone.utc)

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    def commit(self, db: AsyncSession) -> None:
        """Make the session's claims permanent."""
        self._pending.pop(id(db), None)

    def rollback(self, db: AsyncSession) -> None:
        """Discard the claims made by the session since its last commit."""
        for key in self._pending.pop(id(db), []):
            self.markers.pop(key, None)

    async def try_claim(self, db: AsyncSession, event_id: str, consumer_name: str) -> bool:
        self._calls.append(("try_claim", event_id, consumer_name))
        key = (event_id, consumer_name)
        if key in self.markers:
            return False
        self.markers[key] = datetime.now(timezone.utc)
        self._pending.setdefault(id(db), []).append(key)
        return True

    async def purge_older_than(self, db: AsyncSession, cutoff: datetime) -> int:
        self._calls.append(("purge_older_than", cutoff))
        stale = [k for k, at in self.markers.items() if at < cutoff]
        for key in stale:
            del self.markers[key]
        return len(stale)
