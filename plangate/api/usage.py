"""Internal usage endpoints.

Called by trusted services, not by end users: record tenant-originated
usage, answer advisory limit checks and return the usage summary.

Writes commit the ledger first and update the live counter afterwards. A
counter that cannot be reached is logged and counted but never fails a
request whose ledger write already committed; the daily snapshot and the
limit checks keep working from what the counter does hold.
"""

from typing import Awaitable
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from plangate import schemas
from plangate.api import deps
from plangate.api.deps import Inject
from plangate.core.exceptions import TransientStoreError
from plangate.core.logging import logger
from plangate.core.protocols.metrics import BillingMetrics
from plangate.domains.usage.limit_gate import CacheLimitGuard
from plangate.domains.usage.protocols import (
    LimitEnforcementGateProtocol,
    UsageCounterStoreProtocol,
    UsageLedgerProtocol,
)

router = APIRouter(prefix="/internal/tenants/{tenant_id}/usage", tags=["usage"])


async def _write_counter(
    write: Awaitable[int],
    tenant_id: UUID,
    metric: str,
    operation: str,
    metrics: BillingMetrics,
    fallback: int,
) -> int:
    """Await a live-counter write; on a cache outage return *fallback* instead."""
    try:
        return await write
    except TransientStoreError as e:
        logger.with_context(tenant_id=str(tenant_id), metric=metric).error(
            f"Usage counter {operation} failed after the ledger committed: {e}"
        )
        metrics.inc_counter_error(metric, operation)
        return fallback


@router.post("/{metric}/increment", response_model=schemas.UsageChangeResult)
async def increment_usage(
    tenant_id: UUID,
    metric: str,
    change: schemas.UsageChange,
    db: AsyncSession = Depends(deps.get_db),
    gate: LimitEnforcementGateProtocol = Inject(LimitEnforcementGateProtocol),
    guard: CacheLimitGuard = Inject(CacheLimitGuard),
    counter_store: UsageCounterStoreProtocol = Inject(UsageCounterStoreProtocol),
    ledger: UsageLedgerProtocol = Inject(UsageLedgerProtocol),
    metrics: BillingMetrics = Inject(BillingMetrics),
) -> schemas.UsageChangeResult:
    """Enforce the plan limit and any cache-level override, then record *amount* units.

    Raises LimitExceededError (402) when the amount does not fit.
    """
    await gate.enforce(db, tenant_id, metric, change.amount)
    await guard.check(tenant_id, metric, change.amount)
    ledger_usage = await ledger.increment(db, tenant_id, metric, change.amount)
    await db.commit()
    usage = await _write_counter(
        counter_store.increment(tenant_id, metric, change.amount),
        tenant_id,
        metric,
        "increment",
        metrics,
        fallback=ledger_usage,
    )
    return schemas.UsageChangeResult(metric=metric, usage=usage, ledger_usage=ledger_usage)


@router.post("/{metric}/decrement", response_model=schemas.UsageChangeResult)
async def decrement_usage(
    tenant_id: UUID,
    metric: str,
    change: schemas.UsageChange,
    db: AsyncSession = Depends(deps.get_db),
    counter_store: UsageCounterStoreProtocol = Inject(UsageCounterStoreProtocol),
    ledger: UsageLedgerProtocol = Inject(UsageLedgerProtocol),
    metrics: BillingMetrics = Inject(BillingMetrics),
) -> schemas.UsageChangeResult:
    """Release *amount* units of usage (for example a deleted resource)."""
    ledger_usage = await ledger.decrement(db, tenant_id, metric, change.amount)
    await db.commit()
    usage = await _write_counter(
        counter_store.decrement(tenant_id, metric, change.amount),
        tenant_id,
        metric,
        "decrement",
        metrics,
        fallback=ledger_usage,
    )
    return schemas.UsageChangeResult(metric=metric, usage=usage, ledger_usage=ledger_usage)


@router.put("/{metric}/limit", response_model=schemas.UsageLimitOverride)
async def set_limit_override(
    tenant_id: UUID,
    metric: str,
    override: schemas.UsageLimitOverride,
    counter_store: UsageCounterStoreProtocol = Inject(UsageCounterStoreProtocol),
) -> schemas.UsageLimitOverride:
    """Set the cache-level limit for a metric; a null limit removes it."""
    await counter_store.set_limit(tenant_id, metric, override.limit)
    return override


@router.get("/{metric}/check", response_model=schemas.LimitCheck)
async def check_usage(
    tenant_id: UUID,
    metric: str,
    count: int = Query(1, ge=1),
    db: AsyncSession = Depends(deps.get_db),
    gate: LimitEnforcementGateProtocol = Inject(LimitEnforcementGateProtocol),
) -> schemas.LimitCheck:
    """Whether *count* more units would fit, without recording anything."""
    result = await gate.can_perform_action(db, tenant_id, metric, count)
    return schemas.LimitCheck(
        metric=result.metric,
        current_usage=result.current_usage,
        limit=result.limit,
        remaining=result.remaining,
        allowed=result.allowed,
    )


@router.get("/summary", response_model=schemas.UsageSummary)
async def usage_summary(
    tenant_id: UUID,
    days: int = Query(7, ge=1, le=90),
    db: AsyncSession = Depends(deps.get_db),
    ledger: UsageLedgerProtocol = Inject(UsageLedgerProtocol),
) -> schemas.UsageSummary:
    """Plan, per-metric usage against limits and daily history."""
    return await ledger.get_usage_summary(db, tenant_id, days=days)
