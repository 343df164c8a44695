"""Plan maintenance: create and update plans with validated limits."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core.logging import logger
from plangate.domains.plans.exceptions import PlanNotFoundError, PlanScopeError
from plangate.domains.plans.protocols import PlanServiceProtocol
from plangate.domains.plans.repository import PlanRepositoryProtocol
from plangate.domains.plans.types import assert_valid_plan_limits
from plangate.models.plan import Plan
from plangate.schemas.plan import PlanCreate, PlanUpdate


class PlanService(PlanServiceProtocol):
    """Validates limits and the manual-invoicing scope before writing plans.

    Does not commit; the caller owns the transaction.
    """

    def __init__(self, plan_repo: PlanRepositoryProtocol) -> None:
        """Initialize with the plan repository."""
        self._plan_repo = plan_repo

    async def create_plan(self, db: AsyncSession, plan_in: PlanCreate) -> Plan:
        """Insert a plan after validation.

        Raises:
            PlanScopeError: manual invoicing without a tenant.
            InvalidPlanLimitsError: a limit is negative or not finite.
        """
        if plan_in.manual_invoicing and plan_in.tenant_id is None:
            raise PlanScopeError()
        assert_valid_plan_limits(plan_in.limits)

        values = plan_in.model_dump(exclude={"metadata"})
        values["plan_metadata"] = plan_in.metadata
        plan = await self._plan_repo.create(db, **values)
        logger.with_context(plan_id=str(plan.id)).info(f"Created plan '{plan.name}'")
        return plan

    async def update_plan(self, db: AsyncSession, plan_id: UUID, plan_in: PlanUpdate) -> Plan:
        """Apply the set fields of *plan_in* to an existing plan."""
        plan = await self._plan_repo.get(db, plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")

        changes = plan_in.model_dump(exclude_unset=True)
        if "limits" in changes:
            changes["limits"] = changes["limits"] or {}
            assert_valid_plan_limits(changes["limits"])

        manual = changes.get("manual_invoicing", plan.manual_invoicing)
        tenant_id = changes["tenant_id"] if "tenant_id" in changes else plan.tenant_id
        if manual and tenant_id is None:
            raise PlanScopeError()

        if "metadata" in changes:
            changes["plan_metadata"] = changes.pop("metadata")
        for field, value in changes.items():
            setattr(plan, field, value)
        return await self._plan_repo.save(db, plan)
