from rental_api import create_app
from rental_api.services.common import _store
from rental_api.services.vehicle_service import VehicleService
from rental_api.utils.constants import Role
from rental_api.utils.security import generate_hash


def ensure_user(store, username: str, password: str, role: str, email: str = ""):
    """
    Ensure a user with `username` exists in the store.
    - If exists: update password hash and role (idempotent).
    - If not:   create a new user.
    """
    u = store.find_user(username)
    if u:
        u["password_hash"] = generate_hash(password)
        u["role"] = role
        store.save()
        return u["user_id"]
    return store.create_user(username, email, generate_hash(password), role)


def main():
    app = create_app()
    with app.app_context():
        store = _store()
        if not store.path:
            print("DATA_PATH is not set; seeding an in-memory store has no lasting effect.")

        # ---- Admin / customer demo accounts ----
        ensure_user(store, app.config["ADMIN_USERNAME"], app.config["ADMIN_PASSWORD"], Role.ADMIN)
        ensure_user(store, "customer", "Customer123", Role.CUSTOMER, "customer@example.com")

        # ---- Demo vehicles (create only if none exist) ----
        if not store.vehicles:
            for payload in (
                {"make": "Toyota", "model": "Corolla", "year": 2021, "type": "car",
                 "dailyRate": 45, "location": "Auckland", "images": ["/static/images/corolla.jpg"]},
                {"make": "Honda", "model": "Civic", "year": 2022, "type": "car",
                 "dailyRate": 50, "location": "Auckland", "images": ["/static/images/civic.jpg"]},
                {"make": "Yamaha", "model": "MT-07", "year": 2020, "type": "motorbike",
                 "dailyRate": 40, "location": "Wellington", "images": ["/static/images/yamaha.jpg"]},
                {"make": "Isuzu", "model": "N-Series", "year": 2019, "type": "truck",
                 "dailyRate": 95, "location": "Christchurch", "images": ["/static/images/isuzu.jpg"]},
            ):
                VehicleService.create_vehicle(payload, store=store)

        print("Seed complete.")
        print(f"Admin login:    {app.config['ADMIN_USERNAME']} / {app.config['ADMIN_PASSWORD']}")
        print("Customer login: customer / Customer123")


if __name__ == "__main__":
    main()
