"""Fake plan repository for testing."""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.models.plan import Plan


class FakePlanRepository:
    """In-memory fake for PlanRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty in-memory store."""
        self._plans: dict[UUID, Plan] = {}
        self._calls: list[tuple] = []

    def seed(self, plan: Plan) -> Plan:
        """Store a plan row."""
        self._plans[plan.id] = plan
        return plan

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    async def get(self, db: AsyncSession, plan_id: UUID) -> Optional[Plan]:
        """Get a plan by id."""
        self._calls.append(("get", plan_id))
        return self._plans.get(plan_id)

    async def get_active_manual_for_tenant(
        self, db: AsyncSession, tenant_id: UUID
    ) -> Optional[Plan]:
        """Newest active manual-invoicing plan for the tenant."""
        self._calls.append(("get_active_manual_for_tenant", tenant_id))
        matches = [
            p
            for p in self._plans.values()
            if p.tenant_id == tenant_id and p.is_active and p.manual_invoicing
        ]
        return _newest(matches)

    async def get_active_shared_by_price(self, db: AsyncSession, price_ref: str) -> Optional[Plan]:
        """Newest active shared plan with the price."""
        self._calls.append(("get_active_shared_by_price", price_ref))
        matches = [
            p
            for p in self._plans.values()
            if p.price_ref == price_ref and p.is_active and p.tenant_id is None
        ]
        return _newest(matches)

    async def create(self, db: AsyncSession, **values: Any) -> Plan:
        """Create a plan row in memory."""
        self._calls.append(("create", values))
        now = datetime.now(timezone.utc)
        values.setdefault("is_active", True)
        values.setdefault("manual_invoicing", False)
        values.setdefault("limits", {})
        plan = Plan(id=uuid4(), created_at=now, modified_at=now, **values)
        return self.seed(plan)

    async def save(self, db: AsyncSession, plan: Plan) -> Plan:
        """Store the updated row."""
        self._calls.append(("save", plan.id))
        return self.seed(plan)


def _newest(plans: list[Plan]) -> Optional[Plan]:
    if not plans:
        return None
    return max(plans, key=lambda p: p.created_at or datetime.min.replace(tzinfo=timezone.utc))
