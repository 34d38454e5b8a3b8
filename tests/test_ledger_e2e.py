"""End-to-end ledger tests over a real AsyncSession (in-memory SQLite).

Requests go through the production routers with the same commit/rollback
session lifecycle as get_db, so flushes, refreshes and serialization of ORM
rows are exercised the way they are against PostgreSQL.
"""
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.api.routes import (
    budget_adjustments,
    budget_allocations,
    budget_releases,
    cost_centers,
    object_codes,
    vendors,
)
from budget_ledger.models.orm import (  # noqa: F401 - register tables on Base.metadata
    budget_adjustment,
    budget_allocation,
    budget_release,
    reference,
)
from budget_ledger.models.orm.base import Base


@pytest.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    app = FastAPI()
    for module in (
        cost_centers, object_codes, vendors,
        budget_allocations, budget_releases, budget_adjustments,
    ):
        app.include_router(module.router, prefix="/api")

    async def _db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _allocation(client, cost_center, amount):
    resp = await client.post("/api/budget-allocations", json={
        "financialYear": "2024-25",
        "costCenter": cost_center,
        "objectCode": "OC-2100",
        "totalAllocation": amount,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _total(client, allocation_id):
    resp = await client.get(f"/api/budget-allocations/{allocation_id}")
    assert resp.status_code == 200, resp.text
    return resp.json()["totalAllocation"]


@pytest.fixture
async def pair(client):
    """Allocations A = 500 and B = 300 in the same financial year."""
    for code in ("CC-A", "CC-B"):
        resp = await client.post("/api/cost-centers", json={"code": code, "name": f"Center {code}"})
        assert resp.status_code == 201, resp.text
    resp = await client.post("/api/object-codes", json={"code": "OC-2100", "name": "Supplies"})
    assert resp.status_code == 201, resp.text
    return await _allocation(client, "CC-A", 500), await _allocation(client, "CC-B", 300)


class TestReappropriationLifecycle:
    @pytest.mark.asyncio
    async def test_apply_update_and_delete(self, client, pair):
        a, b = pair

        resp = await client.post("/api/budget-adjustments", json={
            "period": "reappropriation",
            "fromAllocation": a["id"],
            "toAllocation": b["id"],
            "budgetReleased": 200,
            "remarks": "Move to CC-B",
        })
        assert resp.status_code == 201, resp.text
        created = resp.json()
        touched = {row["id"]: row for row in created["allocations"]}
        assert touched[a["id"]]["totalAllocation"] == 300.0
        assert touched[b["id"]]["totalAllocation"] == 500.0
        assert touched[a["id"]]["reappropriation"] == -200.0
        assert touched[a["id"]]["baseAllocation"] == 500.0
        assert created["amountAllocated"] == 500.0
        assert created["fromCostCenter"] == "CC-A"
        assert created["toCostCenter"] == "CC-B"
        assert created["updatedAt"] is not None
        assert await _total(client, a["id"]) + await _total(client, b["id"]) == 800.0

        resp = await client.put(f"/api/budget-adjustments/{created['id']}", json={
            "period": "reappropriation",
            "fromAllocation": a["id"],
            "toAllocation": b["id"],
            "budgetReleased": 150,
        })
        assert resp.status_code == 200, resp.text
        assert resp.json()["amountAllocated"] == 500.0
        assert await _total(client, a["id"]) == 350.0
        assert await _total(client, b["id"]) == 450.0

        resp = await client.delete(f"/api/budget-adjustments/{created['id']}")
        assert resp.status_code == 204
        assert await _total(client, a["id"]) == 500.0
        assert await _total(client, b["id"]) == 300.0

        resp = await client.delete(f"/api/budget-adjustments/{created['id']}")
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "adjustment_not_found"

    @pytest.mark.asyncio
    async def test_insufficient_budget_keeps_state(self, client, pair):
        a, _ = pair

        resp = await client.post("/api/budget-adjustments", json={
            "period": "surrender",
            "fromAllocation": a["id"],
            "budgetReleased": 200,
        })
        assert resp.status_code == 201, resp.text

        resp = await client.post("/api/budget-adjustments", json={
            "period": "surrender",
            "fromAllocation": a["id"],
            "budgetReleased": 900,
        })
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "insufficient_budget"

        allocation = (await client.get(f"/api/budget-allocations/{a['id']}")).json()
        assert allocation["totalAllocation"] == 300.0
        assert allocation["surrenders"] == 200.0

        listing = (await client.get(
            "/api/budget-adjustments", params={"allocationId": a["id"]}
        )).json()
        assert listing["total"] == 1

    @pytest.mark.asyncio
    async def test_allocation_edit_and_summary(self, client, pair):
        a, _ = pair

        resp = await client.put(f"/api/budget-allocations/{a['id']}", json={"notes": "Revised plan"})
        assert resp.status_code == 200, resp.text
        assert resp.json()["notes"] == "Revised plan"
        assert resp.json()["totalAllocation"] == 500.0

        resp = await client.post("/api/budget-releases", json={
            "allocationId": a["id"], "quarter": 1, "amount": 125,
        })
        assert resp.status_code == 201, resp.text
        assert resp.json()["costCenter"] == "CC-A"

        summary = (await client.get(f"/api/budget-allocations/{a['id']}/summary")).json()
        assert summary["released"] == 125.0
        assert summary["unreleased"] == 375.0


class TestVendors:
    @pytest.mark.asyncio
    async def test_create_update_and_deactivate(self, client):
        resp = await client.post("/api/vendors", json={"vendorNumber": "V-1", "name": "Acme"})
        assert resp.status_code == 201, resp.text
        vendor_id = resp.json()["id"]

        resp = await client.put(f"/api/vendors/{vendor_id}", json={"phone": "555-0100"})
        assert resp.status_code == 200, resp.text
        assert resp.json()["phone"] == "555-0100"

        resp = await client.delete(f"/api/vendors/{vendor_id}")
        assert resp.status_code == 204
        resp = await client.get(f"/api/vendors/{vendor_id}")
        assert resp.json()["isActive"] is False
