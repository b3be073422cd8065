"""
End-to-end booking flow over HTTP: quote, create (client price ignored),
conflict, availability, list/detail rights, cancel, storage outage.
"""
from conftest import ADMIN, CUSTOMER, OTHER
from rental_api.exceptions import StorageTimeoutError


def book(client, vehicle_id, start, end, **extra):
    return client.post("/api/bookings", json={"vehicleId": vehicle_id, "startDate": start, "endDate": end, **extra})


def test_quote_endpoint(client, vehicle_id):
    r = client.get("/api/bookings/quote",
                   query_string={"vehicleId": vehicle_id, "startDate": "2024-01-01", "endDate": "2024-01-04"})
    assert r.status_code == 200
    body = r.get_json()
    assert body["rentalDays"] == 3
    assert body["totalPrice"] == 150


def test_quote_missing_params(client):
    r = client.get("/api/bookings/quote", query_string={"vehicleId": "x"})
    assert r.status_code == 400


def test_create_ignores_client_price(client, login, vehicle_id):
    login(*CUSTOMER)
    r = book(client, vehicle_id, "2024-01-01", "2024-01-04", totalPrice=1)
    assert r.status_code == 201
    booking = r.get_json()["booking"]
    assert booking["totalPrice"] == 150
    assert booking["status"] == "pending"


def test_conflict_is_409_with_blocked_ranges(client, login, vehicle_id):
    login(*CUSTOMER)
    assert book(client, vehicle_id, "2024-01-01", "2024-01-04").status_code == 201

    r = book(client, vehicle_id, "2024-01-03", "2024-01-05")
    assert r.status_code == 409
    body = r.get_json()
    assert body["message"] == "Error: request conflicts with an existing booking"
    assert body["conflicts"] == [{"start": "2024-01-01", "end": "2024-01-04"}]

    assert book(client, vehicle_id, "2024-01-04", "2024-01-06").status_code == 201


def test_past_dates_are_400(client, login, vehicle_id):
    login(*CUSTOMER)
    r = book(client, vehicle_id, "2023-11-30", "2023-12-03")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Error: invalid date range"


def test_unknown_vehicle_is_404(client, login):
    login(*CUSTOMER)
    r = book(client, "missing", "2024-01-01", "2024-01-04")
    assert r.status_code == 404


def test_availability_endpoint(client, login, vehicle_id):
    login(*CUSTOMER)
    book(client, vehicle_id, "2024-01-01", "2024-01-04")

    r = client.get(f"/api/vehicles/availability/{vehicle_id}",
                   query_string={"start": "2024-01-02", "end": "2024-01-03"})
    assert r.get_json() == {"available": False, "conflicts": [{"start": "2024-01-01", "end": "2024-01-04"}]}

    r = client.get(f"/api/vehicles/availability/{vehicle_id}",
                   query_string={"start": "2024-01-04", "end": "2024-01-05"})
    assert r.get_json()["available"] is True

    r = client.get(f"/api/vehicles/availability/{vehicle_id}")
    assert r.get_json() == {"unavailableDates": [{"start": "2024-01-01", "end": "2024-01-04"}]}


def test_list_detail_and_cancel_rights(client, login, vehicle_id):
    login(*CUSTOMER)
    bid = book(client, vehicle_id, "2024-01-01", "2024-01-04").get_json()["booking"]["bookingId"]

    login(*OTHER)
    assert client.get("/api/bookings").get_json() == []
    assert client.get(f"/api/bookings/{bid}").status_code == 403
    assert client.put(f"/api/bookings/{bid}/cancel").status_code == 403

    login(*ADMIN)
    assert [b["bookingId"] for b in client.get("/api/bookings").get_json()] == [bid]
    assert client.get(f"/api/bookings/{bid}").status_code == 200

    login(*CUSTOMER)
    r = client.put(f"/api/bookings/{bid}/cancel")
    assert r.status_code == 200
    assert r.get_json()["booking"]["status"] == "cancelled"

    r = client.put(f"/api/bookings/{bid}/cancel")
    assert r.status_code == 409

    assert client.get("/api/bookings/missing").status_code == 404


def test_storage_timeout_is_503(client, store, vehicle_id, monkeypatch):
    def boom(*args, **kwargs):
        raise StorageTimeoutError("Error: store lock not acquired within 2.0s")

    monkeypatch.setattr(store, "find_bookings", boom)
    r = client.get(f"/api/vehicles/availability/{vehicle_id}",
                   query_string={"start": "2024-01-02", "end": "2024-01-03"})
    assert r.status_code == 503
    # internal detail stays server-side
    assert r.get_json() == {"message": "Error: service temporarily unavailable"}
