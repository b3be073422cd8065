import logging
import os
import pickle
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path

from ..exceptions import ConflictError, InvalidStateError, NotFoundError, StorageTimeoutError
from ..utils.dates import utc_now_iso
from ..utils.security import generate_hash
from .booking import Booking
from .user import User
from .vehicle import Vehicle

log = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"
DEFAULT_TIMEOUT = 5.0


class Store:
    """
    Thread-safe document store. Serves as the Vehicle Directory and the
    Booking Ledger. Records are plain dicts keyed by id; reads hand out
    model objects.

    Every lock acquisition is bounded by `timeout` seconds and raises
    StorageTimeoutError on expiry. When `path` is set each committed write
    is flushed to a pickle file with an atomic replace; `path=None` keeps
    everything in memory.
    """

    _inst = None
    _inst_lock = threading.Lock()

    def __init__(self, path: str | os.PathLike | None = None, timeout: float = DEFAULT_TIMEOUT,
                 admin_username: str | None = None, admin_password: str | None = None):
        self.path = str(path) if path else None
        self.timeout = float(timeout)
        self.users: dict[str, dict] = {}
        self.vehicles: dict[str, dict] = {}
        self.bookings: dict[str, dict] = {}
        self.payments: dict[str, dict] = {}
        self._rw = threading.RLock()
        self._locks_guard = threading.Lock()
        # vehicle id -> [RLock, holders+waiters]; entries go away when unused
        self._vehicle_locks: dict[str, list] = {}

        log.info("Store using %s", self.path or "memory")
        self._load()

        # Default admin account, only for a fresh store
        # (so seeded or test data is never touched)
        if admin_username and admin_password and not self.users:
            self.create_user(admin_username, "", generate_hash(admin_password), "admin")

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None, **kwargs):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH, **kwargs)
        return cls._inst

    @classmethod
    def reset_instance(cls):
        with cls._inst_lock:
            cls._inst = None

    # ---------- Locking ----------
    @contextmanager
    def _locked(self, lock=None):
        lock = lock or self._rw
        if not lock.acquire(timeout=self.timeout):
            raise StorageTimeoutError(f"Error: store lock not acquired within {self.timeout}s")
        try:
            yield
        finally:
            lock.release()

    @contextmanager
    def vehicle_guard(self, vehicle_id: str):
        """
        Per-vehicle mutual exclusion. Hold it across any read-check-write
        sequence on one vehicle's bookings. Re-entrant for the owning thread.
        """
        key = str(vehicle_id)
        with self._locked(self._locks_guard):
            entry = self._vehicle_locks.setdefault(key, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with self._locked(entry[0]):
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._vehicle_locks[key]

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            log.warning("Store load failed (%s); starting empty.", e)
            return

        if isinstance(data, dict) and "bookings" in data:
            self.users = data.get("users", {}) or {}
            self.vehicles = data.get("vehicles", {}) or {}
            self.bookings = data.get("bookings", {}) or {}
            self.payments = data.get("payments", {}) or {}
            log.info("Store loaded: users=%d, vehicles=%d, bookings=%d, payments=%d",
                     len(self.users), len(self.vehicles), len(self.bookings), len(self.payments))
        else:
            # Incompatible data format: back up the old file and start empty
            bak = self.path + ".bak"
            try:
                os.replace(self.path, bak)
                log.warning("Incompatible store (%s); backed up to %s. Starting empty.",
                            type(data).__name__, bak)
            except OSError as e:
                log.error("Store backup failed: %s", e)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        if not self.path:
            return
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        payload = {
            "users": self.users,
            "vehicles": self.vehicles,
            "bookings": self.bookings,
            "payments": self.payments,
        }
        with open(tmp, "wb") as f:
            pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)
        log.debug("Store flushed to %s", self.path)

    def _commit(self, undo):
        """Flush to disk; if the write fails run `undo` so memory matches disk."""
        try:
            self._dump()
        except OSError:
            undo()
            raise

    def save(self):
        """Thread-safe save method."""
        with self._locked():
            self._dump()

    def clear(self):
        with self._locked():
            self.users.clear()
            self.vehicles.clear()
            self.bookings.clear()
            self.payments.clear()
            self._dump()

    # ---------- Users ----------
    def user_exists(self, username: str) -> bool:
        """Return True if the given username already exists (case-insensitive)."""
        return self.find_user(username) is not None

    def find_user(self, username: str) -> dict | None:
        """Find a raw user record by username."""
        key = (username or "").lower()
        with self._locked():
            for u in self.users.values():
                if u["username"].lower() == key:
                    return u
        return None

    def get_user(self, user_id: str) -> User | None:
        with self._locked():
            d = self.users.get(str(user_id))
        return User.from_dict(d) if d else None

    def create_user(self, username: str, email: str, password_hash: str, role: str) -> str:
        """Create a new user and return its ID."""
        with self._locked():
            if self.user_exists(username):
                raise ValueError("Username already exists")
            uid = str(uuid.uuid4())
            self.users[uid] = {
                "user_id": uid,
                "username": username,
                "email": email,
                "password_hash": password_hash,
                "role": role,
            }
            self._dump()
            return uid

    # ---------- Vehicles ----------
    def create_vehicle(self, data: dict) -> str:
        """Create a new vehicle record and return its ID."""
        with self._locked():
            vid = str(uuid.uuid4())
            record = dict(data)
            record["vehicle_id"] = vid
            self.vehicles[vid] = record
            self._dump()
            return vid

    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        """Vehicle Directory lookup; None when the id is unknown."""
        with self._locked():
            d = self.vehicles.get(str(vehicle_id))
            d = dict(d) if d else None
        return Vehicle.from_dict(d) if d else None

    def list_vehicles(self) -> list[Vehicle]:
        with self._locked():
            rows = [dict(v) for v in self.vehicles.values()]
        return [Vehicle.from_dict(v) for v in rows]

    def update_vehicle(self, vehicle_id: str, **updates) -> Vehicle:
        """Update vehicle attributes; None values are ignored."""
        with self._locked():
            v = self.vehicles.get(str(vehicle_id))
            if v is None:
                raise NotFoundError(f"Error: vehicle '{vehicle_id}' not found")
            v.update({k: val for k, val in updates.items() if val is not None})
            self._dump()
            return Vehicle.from_dict(dict(v))

    def delete_vehicle(self, vehicle_id: str) -> bool:
        """Delete a vehicle by ID."""
        with self._locked():
            if self.vehicles.pop(str(vehicle_id), None) is None:
                return False
            self._dump()
            return True

    # ---------- Bookings (ledger) ----------
    def get_booking(self, booking_id: str) -> Booking | None:
        with self._locked():
            d = self.bookings.get(str(booking_id))
            d = dict(d) if d else None
        return Booking.from_dict(d) if d else None

    def find_bookings(self, vehicle_id: str | None = None, renter_id: str | None = None,
                      statuses=None) -> list[Booking]:
        """
        Query bookings by any combination of vehicle, renter and status set.
        Results are sorted by start date.
        """
        wanted = set(statuses) if statuses is not None else None
        with self._locked():
            rows = [dict(r) for r in self.bookings.values()
                    if (vehicle_id is None or r["vehicle_id"] == str(vehicle_id))
                    and (renter_id is None or r["renter_id"] == str(renter_id))
                    and (wanted is None or r["status"] in wanted)]
        out = [Booking.from_dict(r) for r in rows]
        out.sort(key=lambda b: (b.start_date, b.end_date))
        return out

    def insert_booking(self, booking: Booking) -> Booking:
        """
        Insert a booking and return it with its new id.
        Exclusion constraint: an active booking is rejected with ConflictError
        if it overlaps another active booking on the same vehicle.
        """
        with self._locked():
            if booking.is_active:
                clashes = []
                for r in self.bookings.values():
                    if r["vehicle_id"] != booking.vehicle_id:
                        continue
                    other = Booking.from_dict(r)
                    if other.is_active and other.overlaps(booking.start_date, booking.end_date):
                        clashes.append((other.start_date, other.end_date))
                if clashes:
                    raise ConflictError(conflicts=sorted(clashes))

            saved = booking.with_changes(
                booking_id=str(uuid.uuid4()),
                created_at=booking.created_at or utc_now_iso(),
            )
            self.bookings[saved.booking_id] = saved.to_record()
            self._commit(lambda: self.bookings.pop(saved.booking_id, None))
            return saved

    def update_booking_status(self, booking_id: str, new_status: str, expected=None, **stamps) -> Booking:
        """
        Set a booking's status (plus any timestamp fields given as keywords).
        If `expected` is given the current status must be one of it,
        otherwise InvalidStateError; the check and the write are atomic.
        """
        with self._locked():
            r = self.bookings.get(str(booking_id))
            if r is None:
                raise NotFoundError(f"Error: booking '{booking_id}' not found")
            if expected is not None and r["status"] not in expected:
                raise InvalidStateError(
                    f"Error: booking is {r['status']}, cannot move to {new_status}")
            before = dict(r)
            r["status"] = new_status
            r.update(stamps)
            self._commit(lambda: (r.clear(), r.update(before)))
            return Booking.from_dict(dict(r))

    # ---------- Payments ----------
    def create_payment(self, data: dict) -> dict:
        with self._locked():
            pid = str(uuid.uuid4())
            record = dict(data)
            record["payment_id"] = pid
            self.payments[pid] = record
            self._commit(lambda: self.payments.pop(pid, None))
            return dict(record)

    def find_payment(self, transaction_id: str) -> dict | None:
        with self._locked():
            for p in self.payments.values():
                if p["transaction_id"] == transaction_id:
                    return dict(p)
        return None

    def update_payment(self, payment_id: str, expected=None, **updates) -> dict:
        """
        Update a payment record. If `expected` is given the current status
        must be one of it, otherwise InvalidStateError; check and write are atomic.
        """
        with self._locked():
            p = self.payments.get(payment_id)
            if p is None:
                raise NotFoundError(f"Error: payment '{payment_id}' not found")
            if expected is not None and p["status"] not in expected:
                raise InvalidStateError(f"Error: payment already {p['status']}")
            before = dict(p)
            p.update(updates)
            self._commit(lambda: (p.clear(), p.update(before)))
            return dict(p)
