"""Internal plan administration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plangate import schemas
from plangate.api import deps
from plangate.api.deps import Inject
from plangate.domains.plans.protocols import PlanServiceProtocol

router = APIRouter(prefix="/internal/plans", tags=["plans"])


@router.post("", response_model=schemas.PlanRead, status_code=201)
async def create_plan(
    plan_in: schemas.PlanCreate,
    db: AsyncSession = Depends(deps.get_db),
    plan_service: PlanServiceProtocol = Inject(PlanServiceProtocol),
) -> schemas.PlanRead:
    """Create a shared or tenant-scoped plan."""
    plan = await plan_service.create_plan(db, plan_in)
    await db.commit()
    return schemas.PlanRead.model_validate(plan)


@router.patch("/{plan_id}", response_model=schemas.PlanRead)
async def update_plan(
    plan_id: UUID,
    plan_in: schemas.PlanUpdate,
    db: AsyncSession = Depends(deps.get_db),
    plan_service: PlanServiceProtocol = Inject(PlanServiceProtocol),
) -> schemas.PlanRead:
    """Partially update a plan; omitted fields are left as they are."""
    plan = await plan_service.update_plan(db, plan_id, plan_in)
    await db.commit()
    return schemas.PlanRead.model_validate(plan)
