import sys, pathlib
from datetime import date

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

# Fixed business date so the 2024 scenario dates are in the future
TODAY = date(2023, 12, 1)

ADMIN = ("admin", "Admin123")
CUSTOMER = ("alice", "Alice123")
OTHER = ("bob", "Bobby123")
WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def store():
    """A fresh in-memory store for each test."""
    from rental_api.models.store import Store
    return Store(None, timeout=2.0)


@pytest.fixture
def arbiter(store):
    from rental_api.services.booking_service import BookingArbiter
    return BookingArbiter(store, today=lambda: TODAY)


@pytest.fixture
def add_vehicle(store):
    """Insert a raw vehicle record (no validation) and return its id."""

    def _add(daily_rate="50", **extra):
        data = {"make": "Toyota", "model": "Corolla", "type": "car", "daily_rate": daily_rate}
        data.update(extra)
        return store.create_vehicle(data)

    return _add


@pytest.fixture
def vehicle_id(add_vehicle):
    """Vehicle X: dailyRate=50."""
    return add_vehicle("50")


@pytest.fixture
def app(store, monkeypatch):
    from rental_api import create_app
    from rental_api.services import common
    from rental_api.utils.security import generate_hash

    monkeypatch.setattr(common, "_today", lambda: TODAY)
    store.create_user(ADMIN[0], "admin@example.com", generate_hash(ADMIN[1]), "admin")
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "PAYMENT_WEBHOOK_SECRET": WEBHOOK_SECRET,
    }, store=store)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def login(client):
    """
    Log the shared test client in as `username`. Customers are registered
    on first use; the admin account already exists.
    """

    def _login(username, password):
        if username != ADMIN[0]:
            client.post("/api/auth/register", json={"username": username, "password": password})
        r = client.post("/api/auth/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.get_json()
        return r.get_json()["user"]["userId"]

    return _login
