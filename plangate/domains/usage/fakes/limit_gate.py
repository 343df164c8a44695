"""Fake limit enforcement gate for testing."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.domains.usage.types import EnforceOptions, LimitCheckResult


class FakeLimitEnforcementGate:
    """Records enforce() calls; raises the configured error when set."""

    def __init__(self, should_raise: Optional[Exception] = None) -> None:
        """Initialize with optional error injection."""
        self.should_raise = should_raise
        self.calls: list[tuple[UUID, str, int, EnforceOptions]] = []

    async def enforce(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        requested: int,
        options: EnforceOptions = EnforceOptions(),
    ) -> None:
        self.calls.append((tenant_id, metric, requested, options))
        if self.should_raise:
            raise self.should_raise

    async def can_perform_action(
        self, db: AsyncSession, tenant_id: UUID, action: str, count: int = 1
    ) -> LimitCheckResult:
        allowed = self.should_raise is None
        return LimitCheckResult(
            metric=action, current_usage=0, limit=None, remaining=None, allowed=allowed
        )
