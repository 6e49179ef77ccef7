"""Integration tests for the work-order API."""

from __future__ import annotations

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldservice.db.engine import get_db
from fieldservice.dependencies import get_coordinator
from fieldservice.main import app
from fieldservice.models import Base, WorkOrder
from fieldservice.services.coordinator import AssignmentCoordinator


@pytest_asyncio.fixture
async def client(db_factory, directory, notifier):
    coordinator = AssignmentCoordinator(directory, notifier)

    async def _get_test_db():
        async with db_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


async def _create(client, **body):
    body.setdefault("title", "Fix AC")
    resp = await client.post("/api/work-orders", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "UP"


async def test_create_and_get_work_order(client):
    created = await _create(
        client,
        title="Replace compressor",
        priority="HIGH",
        customerName="Ann Lee",
        items=[{"itemType": "PART", "description": "Compressor", "quantity": 1, "unitPrice": "450.00"}],
    )
    assert created["status"] == "PENDING"
    assert created["priority"] == "HIGH"
    assert created["customerName"] == "Ann Lee"
    assert created["workOrderNumber"].startswith("WO-")
    assert created["assignedTechnicianId"] is None
    assert len(created["items"]) == 1

    resp = await client.get(f"/api/work-orders/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]


async def test_create_validation_error(client):
    resp = await client.post("/api/work-orders", json={"title": "   "})
    assert resp.status_code == 400
    body = resp.json()
    assert body["detail"] == "Validation failed"
    assert any(e["field"] == "title" for e in body["errors"])


async def test_get_missing_work_order(client):
    resp = await client.get("/api/work-orders/nope")
    assert resp.status_code == 404
    assert "nope" in resp.json()["detail"]


async def test_assign_and_unassign(client, directory):
    wo = await _create(client)

    resp = await client.patch(f"/api/work-orders/{wo['id']}/assign", json={"technicianId": "tech-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ASSIGNED"
    assert body["assignedTechnicianId"] == "tech-1"
    assert body["assignedTechnicianName"] == "Maria Lopez"

    resp = await client.patch(f"/api/work-orders/{wo['id']}/unassign")
    assert resp.status_code == 200
    assert resp.json()["status"] == "PENDING"
    assert resp.json()["assignedTechnicianId"] is None
    assert [s for _, s in directory.status_calls] == ["BUSY", "AVAILABLE"]


async def test_assign_succeeds_while_technician_service_is_down(client, directory):
    directory.fail_updates = True
    directory.fail_lookups = True
    wo = await _create(client)

    resp = await client.patch(f"/api/work-orders/{wo['id']}/assign", json={"technicianId": "tech-1"})
    assert resp.status_code == 200
    assert resp.json()["assignedTechnicianId"] == "tech-1"
    assert resp.json()["assignedTechnicianName"] is None


async def test_assign_requires_technician_id(client):
    wo = await _create(client)
    resp = await client.patch(f"/api/work-orders/{wo['id']}/assign", json={})
    assert resp.status_code == 400


async def test_assign_cancelled_work_order_is_rejected(client):
    wo = await _create(client)
    resp = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "CANCELLED"})
    assert resp.status_code == 200

    resp = await client.patch(f"/api/work-orders/{wo['id']}/assign", json={"technicianId": "tech-1"})
    assert resp.status_code == 400
    assert "CANCELLED" in resp.json()["detail"]


async def test_status_lifecycle(client):
    wo = await _create(client)
    await client.patch(f"/api/work-orders/{wo['id']}/assign", json={"technicianId": "tech-1"})

    started = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "IN_PROGRESS"})
    assert started.status_code == 200
    assert started.json()["startedAt"] is not None

    done = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "COMPLETED"})
    assert done.status_code == 200
    assert done.json()["completedAt"] is not None
    assert done.json()["startedAt"] == started.json()["startedAt"]

    again = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "COMPLETED"})
    assert again.status_code == 200
    assert again.json()["version"] == done.json()["version"]

    reopen = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "PENDING"})
    assert reopen.status_code == 400


async def test_unknown_status_value(client):
    wo = await _create(client)
    resp = await client.patch(f"/api/work-orders/{wo['id']}/status", json={"status": "DONE"})
    assert resp.status_code == 400


async def test_update_work_order(client):
    wo = await _create(client, estimatedDuration=90)
    resp = await client.put(
        f"/api/work-orders/{wo['id']}",
        json={"notes": "Gate code 1234", "estimatedDuration": None, "priority": "EMERGENCY"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["notes"] == "Gate code 1234"
    assert body["estimatedDuration"] is None
    assert body["priority"] == "EMERGENCY"
    assert body["title"] == "Fix AC"


async def test_queries_and_stats(client):
    a = await _create(client, title="A", scheduledDate="2026-04-10T09:00:00Z")
    await _create(client, title="B", scheduledDate="2026-05-10T09:00:00Z")
    await client.patch(f"/api/work-orders/{a['id']}/assign", json={"technicianId": "tech-2"})

    resp = await client.get("/api/work-orders")
    assert len(resp.json()) == 2

    resp = await client.get("/api/work-orders/status/ASSIGNED")
    assert [w["title"] for w in resp.json()] == ["A"]

    resp = await client.get("/api/work-orders/technician/tech-2")
    assert [w["title"] for w in resp.json()] == ["A"]

    resp = await client.get(
        "/api/work-orders/date-range",
        params={"start": "2026-05-01T00:00:00Z", "end": "2026-05-31T00:00:00Z"},
    )
    assert [w["title"] for w in resp.json()] == ["B"]

    resp = await client.get(
        "/api/work-orders/date-range",
        params={"start": "2026-05-31T00:00:00Z", "end": "2026-05-01T00:00:00Z"},
    )
    assert resp.status_code == 400

    resp = await client.get("/api/work-orders/stats/count-by-status/PENDING")
    assert resp.json() == {"status": "PENDING", "count": 1}

    resp = await client.get("/api/work-orders/stats/count-by-technician/tech-2")
    assert resp.json() == {"technicianId": "tech-2", "count": 1}


async def test_delete_work_order(client):
    wo = await _create(client)
    resp = await client.delete(f"/api/work-orders/{wo['id']}")
    assert resp.status_code == 204

    resp = await client.get(f"/api/work-orders/{wo['id']}")
    assert resp.status_code == 404

    resp = await client.delete(f"/api/work-orders/{wo['id']}")
    assert resp.status_code == 404


async def test_lookup_by_number_priority_and_overdue(client):
    late = await _create(client, title="Late", priority="CRITICAL", scheduledDate="2020-01-01T08:00:00Z")
    await _create(client, title="Later", scheduledDate="2099-01-01T08:00:00Z")
    closed = await _create(client, title="Closed", priority="CRITICAL", scheduledDate="2020-01-02T08:00:00Z")
    await client.patch(f"/api/work-orders/{closed['id']}/status", json={"status": "CANCELLED"})

    resp = await client.get(f"/api/work-orders/number/{late['workOrderNumber']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == late["id"]

    resp = await client.get("/api/work-orders/number/WO-00000000000000-NONE")
    assert resp.status_code == 404

    resp = await client.get("/api/work-orders/priority/CRITICAL")
    assert [w["title"] for w in resp.json()] == ["Late", "Closed"]

    resp = await client.get("/api/work-orders/priority/URGENT")
    assert resp.status_code == 400

    resp = await client.get("/api/work-orders/overdue")
    assert resp.status_code == 200
    assert [w["title"] for w in resp.json()] == ["Late"]


async def test_assign_rejects_unsafe_technician_id(client, directory):
    wo = await _create(client)

    for technician_id in ["bad\nid", "../../health?x=", "x" * 27]:
        resp = await client.patch(f"/api/work-orders/{wo['id']}/assign", json={"technicianId": technician_id})
        assert resp.status_code == 400
        assert any(e["field"] == "technicianId" for e in resp.json()["errors"])

    resp = await client.get(f"/api/work-orders/{wo['id']}")
    assert resp.json()["status"] == "PENDING"
    assert resp.json()["assignedTechnicianId"] is None
    assert directory.status_calls == []


async def test_stale_write_returns_conflict(tmp_path, directory, notifier):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'wo.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    pinned: list[AsyncSession] = []

    async def _get_test_db():
        if pinned:
            yield pinned.pop()
            return
        async with factory() as session:
            yield session

    coordinator = AssignmentCoordinator(directory, notifier)
    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    stale = factory()
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            wo = (await c.post("/api/work-orders", json={"title": "Shared"})).json()
            # Read version 1 into a session that a later request will reuse.
            await stale.get(WorkOrder, wo["id"])

            resp = await c.put(f"/api/work-orders/{wo['id']}", json={"notes": "first writer"})
            assert resp.status_code == 200
            assert resp.json()["version"] == 2

            pinned.append(stale)
            resp = await c.put(f"/api/work-orders/{wo['id']}", json={"notes": "second writer"})
            assert resp.status_code == 409
            assert "modified concurrently" in resp.json()["detail"]

            resp = await c.get(f"/api/work-orders/{wo['id']}")
            assert resp.json()["notes"] == "first writer"
    finally:
        await stale.close()
        app.dependency_overrides.clear()
        await engine.dispose()
