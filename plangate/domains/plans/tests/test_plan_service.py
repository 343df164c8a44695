"""Unit tests for PlanService validation and writes."""

from uuid import uuid4

import pytest

from plangate.domains.plans.exceptions import (
    InvalidPlanLimitsError,
    PlanNotFoundError,
    PlanScopeError,
)
from plangate.domains.plans.tests.conftest import DEFAULT_TENANT_ID, _make_plan, _make_service
from plangate.schemas.plan import PlanCreate, PlanUpdate


class TestCreatePlan:
    @pytest.mark.asyncio
    async def test_creates_shared_plan(self, db):
        service, plans = _make_service()

        plan = await service.create_plan(
            db,
            PlanCreate(
                name="Starter",
                price_ref="price_starter",
                limits={"api_calls": 1000},
                metadata={"tier": 1},
            ),
        )

        assert plans.call_count("create") == 1
        assert plan.limits == {"api_calls": 1000}
        assert plan.plan_metadata == {"tier": 1}
        assert plan.tenant_id is None

    @pytest.mark.asyncio
    async def test_manual_plan_requires_tenant(self, db):
        service, plans = _make_service()

        with pytest.raises(PlanScopeError):
            await service.create_plan(db, PlanCreate(name="Contract", manual_invoicing=True))
        assert plans.call_count("create") == 0

    @pytest.mark.asyncio
    async def test_manual_plan_with_tenant(self, db):
        service, _ = _make_service()

        plan = await service.create_plan(
            db,
            PlanCreate(name="Contract", manual_invoicing=True, tenant_id=DEFAULT_TENANT_ID),
        )

        assert plan.manual_invoicing is True
        assert plan.tenant_id == DEFAULT_TENANT_ID

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self, db):
        service, plans = _make_service()

        with pytest.raises(InvalidPlanLimitsError) as exc_info:
            await service.create_plan(db, PlanCreate(name="Bad", limits={"api_calls": -5}))

        assert exc_info.value.key == "api_calls"
        assert plans.call_count("create") == 0


class TestUpdatePlan:
    @pytest.mark.asyncio
    async def test_unknown_plan(self, db):
        service, _ = _make_service()

        with pytest.raises(PlanNotFoundError):
            await service.update_plan(db, uuid4(), PlanUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db):
        service, plans = _make_service()
        plan = plans.seed(_make_plan(limits={"api_calls": 10}))

        updated = await service.update_plan(db, plan.id, PlanUpdate(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.limits == {"api_calls": 10}
        assert updated.price_ref == "price_starter"

    @pytest.mark.asyncio
    async def test_limits_replaced_and_validated(self, db):
        service, plans = _make_service()
        plan = plans.seed(_make_plan(limits={"api_calls": 10}))

        updated = await service.update_plan(db, plan.id, PlanUpdate(limits={"entities": 5}))
        assert updated.limits == {"entities": 5}

        with pytest.raises(InvalidPlanLimitsError):
            await service.update_plan(db, plan.id, PlanUpdate(limits={"entities": -1}))

    @pytest.mark.asyncio
    async def test_cannot_make_shared_plan_manual(self, db):
        service, plans = _make_service()
        plan = plans.seed(_make_plan())

        with pytest.raises(PlanScopeError):
            await service.update_plan(db, plan.id, PlanUpdate(manual_invoicing=True))

    @pytest.mark.asyncio
    async def test_cannot_detach_manual_plan_from_tenant(self, db):
        service, plans = _make_service()
        plan = plans.seed(_make_plan(tenant_id=DEFAULT_TENANT_ID, manual_invoicing=True))

        with pytest.raises(PlanScopeError):
            await service.update_plan(db, plan.id, PlanUpdate(tenant_id=None))

    @pytest.mark.asyncio
    async def test_metadata_maps_to_column(self, db):
        service, plans = _make_service()
        plan = plans.seed(_make_plan())

        updated = await service.update_plan(db, plan.id, PlanUpdate(metadata={"crm": "A-1"}))

        assert updated.plan_metadata == {"crm": "A-1"}
