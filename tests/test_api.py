from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.auth import current_active_user
from db.database import get_async_session
from main import app


@pytest.fixture
def client(db_url, world):
    engine = create_async_engine(db_url, poolclass=NullPool)
    maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_session():
        async with maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    # TestClient without a `with` block skips the lifespan (no table creation on Postgres).
    yield TestClient(app)
    app.dependency_overrides.clear()


def sign_in_as(user_id):
    app.dependency_overrides[current_active_user] = lambda: SimpleNamespace(id=user_id, is_active=True)


def test_manager_sees_all_locations(client, world):
    sign_in_as(world.manager_id)
    res = client.get("/inventory")
    assert res.status_code == 200
    assert len(res.json()) == 4


def test_staff_sees_only_assigned_location(client, world):
    sign_in_as(world.staff_id)
    res = client.get("/inventory", params={"location_id": str(world.main_store_id)})
    assert res.status_code == 200
    rows = res.json()
    assert len(rows) == 2
    assert {r["locations"]["name"] for r in rows} == {"BAR"}


def test_user_without_organization_is_sent_to_setup(client, world):
    sign_in_as(world.outsider_id)
    res = client.get("/inventory")
    assert res.status_code == 403
    assert res.json()["detail"] == "Organization setup required"


def test_transfer_endpoint(client, world):
    sign_in_as(world.manager_id)
    payload = {
        "product_id": str(world.beer_id),
        "from_location_id": str(world.main_store_id),
        "to_location_id": str(world.camp_id),
        "quantity": 4,
    }
    res = client.post("/inventory/transfers", json=payload)
    assert res.status_code == 201
    body = res.json()
    assert body["type"] == "transfer"
    assert body["total_value"] == 0
    assert body["quantity"] == 4

    payload["quantity"] = 50
    res = client.post("/inventory/transfers", json=payload)
    assert res.status_code == 409
    assert "Insufficient stock" in res.json()["detail"]


def test_transfer_endpoint_is_manager_only(client, world):
    sign_in_as(world.staff_id)
    res = client.post(
        "/inventory/transfers",
        json={
            "product_id": str(world.beer_id),
            "from_location_id": str(world.bar_id),
            "to_location_id": str(world.camp_id),
            "quantity": 1,
        },
    )
    assert res.status_code == 403


def test_transfer_payload_validation(client, world):
    sign_in_as(world.manager_id)
    res = client.post(
        "/inventory/transfers",
        json={
            "product_id": str(world.beer_id),
            "from_location_id": str(world.bar_id),
            "to_location_id": str(world.bar_id),
            "quantity": 1,
        },
    )
    assert res.status_code == 422


def test_sale_endpoint(client, world):
    sign_in_as(world.staff_id)
    res = client.post(
        "/sales",
        json={
            "location_id": str(world.bar_id),
            "items": [
                {"product_id": str(world.beer_id), "quantity": 2, "price": 3500, "name": "Kilimanjaro Lager"},
                {"product_id": str(world.soda_id), "quantity": 1, "price": 1500, "name": "Coca-Cola"},
            ],
        },
    )
    assert res.status_code == 201
    assert res.json() == {"success": True, "total": 8500.0, "total_display": "TZS 8,500"}

    res = client.post(
        "/sales",
        json={
            "location_id": str(world.bar_id),
            "items": [{"product_id": str(world.soda_id), "quantity": 5, "price": 1500, "name": "Coca-Cola"}],
        },
    )
    assert res.status_code == 409
    assert "Coca-Cola" in res.json()["detail"]


def test_staff_cannot_sell_from_other_location(client, world):
    sign_in_as(world.staff_id)
    res = client.post(
        "/sales",
        json={
            "location_id": str(world.main_store_id),
            "items": [{"product_id": str(world.beer_id), "quantity": 1, "price": 3500}],
        },
    )
    assert res.status_code == 403


def test_approval_flow(client, world):
    sign_in_as(world.staff_id)
    res = client.post(
        "/approvals",
        json={
            "product_id": str(world.beer_id),
            "from_location_id": str(world.main_store_id),
            "to_location_id": str(world.bar_id),
            "quantity": 3,
        },
    )
    assert res.status_code == 201
    request_id = res.json()["id"]

    sign_in_as(world.manager_id)
    pending = client.get("/approvals/pending").json()
    assert [p["id"] for p in pending] == [request_id]
    assert pending[0]["to_loc"]["name"] == "BAR"

    res = client.post(f"/approvals/{request_id}/respond", json={"status": "approved"})
    assert res.status_code == 200
    assert res.json()["type"] == "approved"
    assert res.json()["approved_by"] == str(world.manager_id)

    res = client.post(f"/approvals/{request_id}/respond", json={"status": "rejected"})
    assert res.status_code == 409

    rows = client.get("/inventory", params={"location_id": str(world.bar_id)}).json()
    beer_bar = next(r for r in rows if r["product_id"] == str(world.beer_id))
    assert beer_bar["quantity"] == 8


def test_locations_and_staff(client, world):
    sign_in_as(world.manager_id)
    res = client.post("/locations", json={"name": "Kitchen", "type": "department"})
    assert res.status_code == 201
    assert res.json()["name"] == "KITCHEN"

    names = [loc["name"] for loc in client.get("/locations").json()]
    assert "KITCHEN" in names

    staff = client.get("/staff").json()
    assert {s["full_name"] for s in staff} == {"Asha Manager", "Juma Barman"}


def test_profile_me(client, world):
    sign_in_as(world.staff_id)
    res = client.get("/profiles/me")
    assert res.status_code == 200
    body = res.json()
    assert body["organization"] == {"name": "Baobab Camps"}
    assert body["location"] == {"name": "BAR", "type": "department"}


def test_first_run_setup_creates_organization(client, world):
    sign_in_as(world.outsider_id)
    res = client.post("/organizations", json={"name": "Selous Lodge"})
    assert res.status_code == 201
    assert res.json()["name"] == "Selous Lodge"

    res = client.get("/profiles/me")
    assert res.json()["role"] == "manager"

    res = client.post("/organizations", json={"name": "Second Lodge"})
    assert res.status_code == 409
