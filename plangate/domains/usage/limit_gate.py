"""Limit enforcement gate: request-path admission control.

The check is advisory. Two concurrent requests can both read the same
usage and both be admitted before either increments the counter. Call
sites that need a hard cap must pair the check with an atomic increment
at the point of resource creation.

Everything except an actual over-limit decision fails open: an
unreachable cache, a database error or unresolved plan limits admit the
request and log the condition.
"""

import math
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.logging import logger
from plangate.core.protocols.metrics import BillingMetrics
from plangate.domains.plans.protocols import PlanLimitResolverProtocol
from plangate.domains.plans.types import limit_for
from plangate.domains.usage.exceptions import LimitExceededError
from plangate.domains.usage.protocols import (
    LimitEnforcementGateProtocol,
    UsageCounterStoreProtocol,
)
from plangate.domains.usage.types import (
    DEFAULT_UPGRADE_SUGGESTION,
    EnforceOptions,
    LimitCheckResult,
    effective_limit,
)

_DEFAULT_OPTIONS = EnforceOptions()


class LimitEnforcementGate(LimitEnforcementGateProtocol):
    """Admit or reject requested usage against the tenant's plan limits."""

    def __init__(
        self,
        resolver: PlanLimitResolverProtocol,
        counter_store: UsageCounterStoreProtocol,
        metrics: BillingMetrics,
    ) -> None:
        """Initialize with the plan resolver, counter store and metrics."""
        self._resolver = resolver
        self._counter_store = counter_store
        self._metrics = metrics

    async def enforce(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        metric: str,
        requested: int,
        options: EnforceOptions = _DEFAULT_OPTIONS,
    ) -> None:
        """Return when *requested* more units fit, else raise LimitExceededError."""
        if requested <= 0:
            return

        log = logger.with_context(tenant_id=str(tenant_id), metric=metric)
        try:
            limit = limit_for(await self._resolver.resolve(db, tenant_id), metric)
            if limit is None:
                self._metrics.inc_limit_check(metric, "allowed")
                return
            usage = await self._counter_store.read(tenant_id, metric)
        except Exception as e:
            log.warning(f"Limit check failed, admitting request: {e}", exc_info=True)
            self._metrics.inc_limit_check(metric, "failed_open")
            return

        effective = effective_limit(limit, options.grace_percentage)
        if usage + requested <= effective:
            self._metrics.inc_limit_check(metric, "allowed")
            return

        suggestions = list(
            options.upgrade_suggestions or [DEFAULT_UPGRADE_SUGGESTION.format(metric=metric)]
        )
        self._metrics.inc_limit_check(metric, "rejected")
        log.info(f"Rejecting {requested} {metric}: usage {usage}, effective limit {effective}")
        raise LimitExceededError(
            metric=metric,
            current_usage=usage,
            limit=math.floor(limit),
            requested_amount=requested,
            remaining=max(0, effective - usage),
            effective_limit=effective,
            upgrade_suggestions=suggestions,
            upgrade_url=options.upgrade_url,
        )

    async def can_perform_action(
        self, db: AsyncSession, tenant_id: UUID, action: str, count: int = 1
    ) -> LimitCheckResult:
        """Whether *count* more units of *action* fit within the plan limit.

        Grace tolerance is not applied; this answers "is there room left".
        """
        metric = action
        limit = limit_for(await self._resolver.resolve(db, tenant_id), metric)
        usage = await self._counter_store.read(tenant_id, metric)
        if limit is None:
            return LimitCheckResult(
                metric=metric, current_usage=usage, limit=None, remaining=None, allowed=True
            )
        hard_limit = math.floor(limit)
        remaining = hard_limit - usage
        return LimitCheckResult(
            metric=metric,
            current_usage=usage,
            limit=hard_limit,
            remaining=max(0, remaining),
            allowed=remaining >= count,
        )


class CacheLimitGuard:
    """Lightweight check against the cache-level limit override.

    For internal call sites that skip plan resolution. Without an override,
    or when the cache errors, the request is admitted.
    """

    def __init__(self, counter_store: UsageCounterStoreProtocol) -> None:
        """Initialize with the counter store."""
        self._counter_store = counter_store

    async def check(
        self,
        tenant_id: UUID,
        metric: str,
        amount: int = 1,
        limit: Optional[int] = None,
    ) -> None:
        """Raise LimitExceededError when *amount* more units exceed the override."""
        amount = amount if amount > 0 else 1
        log = logger.with_context(tenant_id=str(tenant_id), metric=metric)
        try:
            if limit is None:
                limit = await self._counter_store.get_limit(tenant_id, metric)
            if limit is None:
                return
            current = await self._counter_store.read(tenant_id, metric)
        except Exception as e:
            log.warning(f"Cache limit guard failed, admitting request: {e}")
            return

        if current + amount > limit:
            raise LimitExceededError(
                metric=metric,
                current_usage=current,
                limit=limit,
                requested_amount=amount,
                remaining=max(0, limit - current),
            )
