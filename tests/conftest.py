import itertools
import os

# Settings are read at import time, so these must be set before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["RUN_MIGRATIONS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.database import Base, get_db, enable_sqlite_foreign_keys


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return ``(auth headers, user dict)``."""
    counter = itertools.count(1)

    def _register(role="client", password="secret123", **fields):
        n = next(counter)
        payload = {
            "name": fields.get("name", f"{role.title()} {n}"),
            "email": fields.get("email", f"{role}{n}@example.com"),
            "password": password,
            "role": role,
            "phone": fields.get("phone", f"07000000{n:02d}"),
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _register


@pytest.fixture
def client_auth(register):
    headers, _ = register("client", name="Alice Owner")
    return headers


@pytest.fixture
def mechanic_auth(register):
    headers, _ = register("mechanic", name="Bob Wrench")
    return headers


def vehicle_payload(vin="1HGCM82633A004352", **overrides):
    payload = {
        "make": "Toyota",
        "model": "Corolla",
        "year": 2018,
        "license_plate": "KDA 123A",
        "vin": vin,
    }
    payload.update(overrides)
    return payload


def request_payload(vehicle_id, **overrides):
    payload = {
        "vehicle_id": vehicle_id,
        "service_type": "Brake repair",
        "description": "Squeaking front brakes",
        "location": "Westlands, Nairobi",
        "urgency": "high",
        "preferred_date": "2026-11-02",
    }
    payload.update(overrides)
    return payload


def quote_payload(request_id, **overrides):
    payload = {
        "request_id": request_id,
        "cost": 100.0,
        "time_required": "2 hours",
        "parts_needed": "Brake pads",
        "availability": "Tomorrow morning",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_vehicle(client):
    vins = itertools.count(1)

    def _make_vehicle(headers, **overrides):
        overrides.setdefault("vin", f"VIN{next(vins):014d}")
        response = client.post("/api/vehicles/", json=vehicle_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_vehicle


@pytest.fixture
def make_request(client, make_vehicle):
    def _make_request(headers, vehicle_id=None, **overrides):
        if vehicle_id is None:
            vehicle_id = make_vehicle(headers)["id"]
        response = client.post("/api/requests/", json=request_payload(vehicle_id, **overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_request


@pytest.fixture
def make_quote(client):
    def _make_quote(headers, request_id, **overrides):
        response = client.post("/api/quotes/", json=quote_payload(request_id, **overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_quote


@pytest.fixture
def service_request(client_auth, make_request):
    return make_request(client_auth)


@pytest.fixture
def quote(mechanic_auth, service_request, make_quote):
    return make_quote(mechanic_auth, service_request["id"])


@pytest.fixture
def accepted_quote(client, client_auth, quote):
    response = client.put(f"/api/quotes/{quote['id']}/accept", headers=client_auth)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def booking(client, client_auth, accepted_quote):
    response = client.post(
        "/api/bookings/",
        json={"quote_id": accepted_quote["id"], "scheduled_date": "2026-11-03T09:00", "notes": "Gate code 1234"},
        headers=client_auth,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def completed_booking(client, mechanic_auth, booking):
    response = client.post(f"/api/bookings/{booking['id']}/complete", headers=mechanic_auth)
    assert response.status_code == 200, response.text
    return response.json()
