"""
Admin-only catalog endpoints reject anonymous (401) and customer (403) callers.
"""
from conftest import ADMIN, CUSTOMER

NEW_VEHICLE = {"make": "Kia", "model": "Rio", "year": 2020, "type": "car", "dailyRate": 38}


def test_anonymous_cannot_create_vehicle(client):
    r = client.post("/api/vehicles", json=NEW_VEHICLE)
    assert r.status_code == 401


def test_customer_cannot_create_vehicle(client, login):
    login(*CUSTOMER)
    r = client.post("/api/vehicles", json=NEW_VEHICLE)
    assert r.status_code == 403


def test_admin_vehicle_crud(client, login):
    login(*ADMIN)
    r = client.post("/api/vehicles", json=NEW_VEHICLE)
    assert r.status_code == 201
    vid = r.get_json()["vehicleId"]

    r = client.put(f"/api/vehicles/{vid}", json={"dailyRate": 42})
    assert r.status_code == 200
    assert r.get_json()["dailyRate"] == 42

    r = client.get("/api/vehicles", query_string={"brand": "kia"})
    assert [v["vehicleId"] for v in r.get_json()] == [vid]

    r = client.delete(f"/api/vehicles/{vid}")
    assert r.status_code == 200
    assert client.get(f"/api/vehicles/{vid}").status_code == 404


def test_admin_create_validation_error_is_400(client, login):
    login(*ADMIN)
    r = client.post("/api/vehicles", json={**NEW_VEHICLE, "dailyRate": -5})
    assert r.status_code == 400
    assert "dailyRate" in r.get_json()["message"]


def test_bookings_require_login(client):
    assert client.get("/api/bookings").status_code == 401
    assert client.post("/api/bookings", json={}).status_code == 401


def test_auth_me(client, login):
    assert client.get("/api/auth/me").status_code == 401
    uid = login(*CUSTOMER)
    r = client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.get_json()["userId"] == uid
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_bad_login_is_401(client):
    r = client.post("/api/auth/login", json={"username": "ghost", "password": "Ghost123"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "Error: authentication required"
