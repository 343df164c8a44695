"""Tests for the internal plan administration endpoints."""

from uuid import UUID, uuid4

TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")


class TestCreatePlan:
    def test_creates_shared_plan(self, api):
        resp = api.client.post(
            "/internal/plans",
            json={
                "name": "Growth",
                "price_ref": "price_growth",
                "limits": {"api_calls": 10000, "projects": 25},
                "metadata": {"tier": 2},
            },
        )

        assert resp.status_code == 201
        body = resp.json()
        assert UUID(body["id"])
        assert body["name"] == "Growth"
        assert body["tenant_id"] is None
        assert body["limits"] == {"api_calls": 10000, "projects": 25}
        assert body["metadata"] == {"tier": 2}
        assert body["is_active"] is True
        assert api.plan_repo.call_count("create") == 1
        api.db.commit.assert_awaited_once()

    def test_negative_limit_is_422_with_key(self, api):
        resp = api.client.post(
            "/internal/plans", json={"name": "Broken", "limits": {"projects": -1}}
        )

        assert resp.status_code == 422
        assert resp.json()["key"] == "projects"
        assert api.plan_repo.call_count("create") == 0
        api.db.commit.assert_not_awaited()

    def test_manual_invoicing_requires_tenant(self, api):
        resp = api.client.post(
            "/internal/plans", json={"name": "Custom", "manual_invoicing": True}
        )

        assert resp.status_code == 400
        assert "tenant_id" in resp.json()["detail"]

    def test_manual_invoicing_plan_for_tenant(self, api):
        resp = api.client.post(
            "/internal/plans",
            json={
                "name": "Custom",
                "manual_invoicing": True,
                "tenant_id": str(TENANT_ID),
                "limits": {"seats": 500},
            },
        )

        assert resp.status_code == 201
        assert resp.json()["tenant_id"] == str(TENANT_ID)
        assert resp.json()["manual_invoicing"] is True


class TestUpdatePlan:
    def _create(self, api, **overrides) -> str:
        payload = {"name": "Starter", "limits": {"projects": 3}, **overrides}
        return api.client.post("/internal/plans", json=payload).json()["id"]

    def test_partial_update_keeps_unset_fields(self, api):
        plan_id = self._create(api, price_ref="price_starter")

        resp = api.client.patch(f"/internal/plans/{plan_id}", json={"limits": {"projects": 5}})

        assert resp.status_code == 200
        body = resp.json()
        assert body["limits"] == {"projects": 5}
        assert body["price_ref"] == "price_starter"
        assert body["name"] == "Starter"

    def test_unknown_plan_is_404(self, api):
        resp = api.client.patch(f"/internal/plans/{uuid4()}", json={"name": "Nope"})

        assert resp.status_code == 404

    def test_clearing_tenant_on_manual_plan_is_rejected(self, api):
        plan_id = self._create(api, manual_invoicing=True, tenant_id=str(TENANT_ID))

        resp = api.client.patch(f"/internal/plans/{plan_id}", json={"tenant_id": None})

        assert resp.status_code == 400
