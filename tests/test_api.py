# tests/test_api.py
import json
from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import config
from database import get_session
from main import app
from models import RentalStatus

START = date.today() + timedelta(days=10)
END = START + timedelta(days=30)


def auth(user_id=7):
    token = jwt.encode({"id": user_id}, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(session_factory, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(config, "STORAGE_BACKEND", "local")

    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def request_rental(client, room_id, start=START, end=END, user_id=7, **extra):
    data = {
        "room_id": str(room_id),
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "deposit_amount": "5000.00",
    }
    data.update(extra)
    return client.post("/api/rentals", data=data, headers=auth(user_id))


def test_token_is_required(client, make_room):
    room = make_room()
    url = f"/api/rentals/availability?room_id={room.id}&start_date={START}&end_date={END}"

    assert client.get(url).status_code == 401
    assert client.get(url, headers={"Authorization": "Bearer not-a-jwt"}).status_code == 403


def test_health(client, monkeypatch):
    assert client.get("/health").json() == {"status": "ok", "database": "ok"}

    monkeypatch.setattr("main.check_connection", lambda: False)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["database"] == "unreachable"


def test_unknown_route(client):
    response = client.get("/api/nothing-here", headers=auth())
    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}


def test_booking_flow(client, make_room):
    room = make_room(price="5000.00")
    availability = client.get(
        "/api/rentals/availability",
        params={"room_id": room.id, "start_date": START.isoformat(), "end_date": END.isoformat()},
        headers=auth(),
    )
    assert availability.status_code == 200
    assert availability.json()["available"] is True

    response = client.post(
        "/api/rentals",
        data={
            "room_id": str(room.id),
            "start_date": START.isoformat(),
            "end_date": END.isoformat(),
            "tenant": json.dumps({"full_name": "Jane Doe"}),
        },
        files=[("documents", ("id-card.jpg", b"front", "image/jpeg"))],
        headers=auth(7),
    )
    assert response.status_code == 201, response.text
    rental = response.json()
    assert rental["status"] == "pending"
    assert rental["user_id"] == 7
    assert rental["total_days"] == 31
    assert Decimal(str(rental["total_price"])) == Decimal("10000.00")
    assert rental["contract_number"].startswith(f"CNT-{date.today():%Y%m%d}-")
    assert rental["tenant_information"]["details"] == {"full_name": "Jane Doe"}
    assert len(rental["tenant_information"]["document_refs"]) == 1

    approved = client.post(f"/api/rentals/{rental['id']}/approve", headers=auth())
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    conflict = request_rental(client, room.id, start=START + timedelta(days=5), user_id=8)
    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "DATE_CONFLICT"

    detail = client.get(f"/api/rentals/{rental['id']}", headers=auth())
    assert detail.status_code == 200
    listed = client.get("/api/rentals", params={"status": "approved"}, headers=auth())
    assert [r["id"] for r in listed.json()["rentals"]] == [rental["id"]]


def test_request_validation(client, make_room):
    room = make_room()

    past = request_rental(client, room.id, start=date.today() - timedelta(days=1))
    assert past.status_code == 422

    reversed_dates = request_rental(client, room.id, start=END, end=START)
    assert reversed_dates.status_code == 422

    bad_tenant = request_rental(client, room.id, tenant="not json")
    assert bad_tenant.status_code == 422

    missing_room = request_rental(client, 999)
    assert missing_room.status_code == 404
    assert missing_room.json()["error"]["code"] == "ROOM_NOT_FOUND"


def test_cancel_is_limited_to_the_requester(client, make_room):
    room = make_room()
    rental = request_rental(client, room.id, user_id=7).json()

    forbidden = client.post(f"/api/rentals/{rental['id']}/cancel", headers=auth(8))
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["code"] == "NOT_OWNER"

    cancelled = client.post(f"/api/rentals/{rental['id']}/cancel", headers=auth(7))
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == RentalStatus.CANCELLED.value

    again = client.post(f"/api/rentals/{rental['id']}/cancel", headers=auth(7))
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_STATE"


def test_lifecycle_routes(client, make_room):
    room = make_room()
    rental = request_rental(client, room.id).json()

    for action, expected in (("approve", "approved"), ("activate", "active"), ("complete", "completed")):
        response = client.post(f"/api/rentals/{rental['id']}/{action}", headers=auth())
        assert response.status_code == 200
        assert response.json()["status"] == expected

    missing = client.post("/api/rentals/999/approve", headers=auth())
    assert missing.status_code == 404
    assert missing.json()["error"]["details"] == {"rental_id": 999}


def test_readings_and_billing(client, make_room):
    room = make_room(price="5000.00")
    rental = request_rental(client, room.id).json()
    client.post(f"/api/rentals/{rental['id']}/approve", headers=auth())

    rates = client.put(
        "/api/utility-rates",
        json={"electricity_rate_per_unit": "8.00", "water_flat_rate": "100.00"},
        headers=auth(),
    )
    assert rates.status_code == 200
    assert Decimal(str(client.get("/api/utility-rates", headers=auth()).json()["water_flat_rate"])) == Decimal("100")

    today = date.today()
    reading = client.post(
        "/api/electricity-usages",
        json={"room_id": room.id, "reading_date": today.isoformat(), "current_units": 120},
        headers=auth(),
    )
    assert reading.status_code == 201
    assert reading.json()["units_used"] == 120

    lower = client.post(
        "/api/electricity-usages",
        json={"room_id": room.id, "reading_date": today.isoformat(), "current_units": 100},
        headers=auth(),
    )
    assert lower.status_code == 422
    assert lower.json()["error"]["details"] == {"current_units": 100, "floor": 120}

    run = client.post(
        "/api/invoices/generate-monthly",
        json={"month": today.month, "year": today.year},
        headers=auth(),
    )
    assert run.status_code == 200
    body = run.json()
    assert body["generated_count"] == 1
    assert body["errors"] == []
    invoice = body["invoices"][0]
    assert Decimal(str(invoice["total_amount"])) == Decimal("6060.00")
    assert invoice["electricity_usage_id"] == reading.json()["id"]

    unbilled = client.get(f"/api/electricity-usages/rooms/{room.id}", params={"unbilled_only": True}, headers=auth())
    assert unbilled.json()["total"] == 0

    rebill = client.post(
        "/api/invoices",
        json={"rental_id": rental["id"], "room_rent": "5000", "electricity_usage_id": reading.json()["id"]},
        headers=auth(),
    )
    assert rebill.status_code == 409
    assert rebill.json()["error"]["code"] == "USAGE_ALREADY_BILLED"

    by_rental = client.get(f"/api/invoices/rental/{rental['id']}", headers=auth())
    assert by_rental.json()["total"] == 1
    by_month = client.get(f"/api/invoices/month/{today.year}/{today.month}", headers=auth())
    assert by_month.json()["total"] == 1
    assert client.get(f"/api/invoices/{invoice['id']}", headers=auth()).status_code == 200
    assert client.get("/api/invoices/999", headers=auth()).status_code == 404

    billable = client.get("/api/invoices/billable-rentals", headers=auth())
    assert [r["id"] for r in billable.json()] == [rental["id"]]


def test_rate_limits(client):
    response = client.put(
        "/api/utility-rates",
        json={"electricity_rate_per_unit": "-1", "water_flat_rate": "100"},
        headers=auth(),
    )
    assert response.status_code == 422
