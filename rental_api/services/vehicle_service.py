from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from . import common
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.vehicle import Vehicle
from ..utils.constants import ACTIVE_BOOKING_STATES, ALLOWED_TYPES
from ..utils.money import is_positive_finite, to_decimal

if TYPE_CHECKING:
    from ..models.store import Store  # noqa: F401

# wire name -> stored field
_FIELDS = {
    "make": "make",
    "model": "model",
    "year": "year",
    "type": "type",
    "dailyRate": "daily_rate",
    "pricePerDay": "daily_rate",
    "description": "description",
    "location": "location",
    "images": "images",
    "ownerId": "owner_id",
}


def _clean_payload(payload: dict, partial: bool = False) -> dict:
    """
    Validate a create/update payload and map it to stored field names.
    With partial=True only the keys present are checked.
    """
    data = {}
    for key, attr in _FIELDS.items():
        if key in payload and payload[key] is not None:
            data[attr] = payload[key]

    if not partial or "make" in data:
        data["make"] = str(data.get("make") or "").strip()
        if not data["make"]:
            raise ValidationError("make is required")
    if not partial or "model" in data:
        data["model"] = str(data.get("model") or "").strip()
        if not data["model"]:
            raise ValidationError("model is required")

    if not partial or "daily_rate" in data:
        if not is_positive_finite(data.get("daily_rate")):
            raise ValidationError("dailyRate must be a positive number")
        # stored as str so Decimal precision survives pickling and reloads
        data["daily_rate"] = str(to_decimal(data["daily_rate"]))

    if "year" in data:
        try:
            year = int(data["year"])
        except (TypeError, ValueError):
            raise ValidationError("year must be an integer")
        if not 1900 <= year <= 2100:
            raise ValidationError("year must be between 1900 and 2100")
        data["year"] = year

    if not partial or "type" in data:
        vtype = common.norm_type(data.get("type")) or "car"
        if vtype not in ALLOWED_TYPES:
            raise ValidationError(f"type must be one of {', '.join(sorted(ALLOWED_TYPES))}")
        data["type"] = vtype

    if "images" in data:
        images = data["images"]
        if isinstance(images, str):
            images = [images]
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            raise ValidationError("images must be a list of strings")
        data["images"] = [i.strip() for i in images if i.strip()]

    return data


class VehicleService:
    """Vehicle catalogue: filter, read, create, update, delete."""

    @staticmethod
    def filter_vehicles(vtype=None, brand=None, min_rate=None, max_rate=None, location=None, *, store=None):
        """
        Filter vehicles by type, make/model, location and price range.
        - brand matches make or model, case-insensitive, partial
        - invalid min/max are ignored; swapped bounds are swapped back
        """
        # 1. Resolve data source
        st = store or common._store()
        res = st.list_vehicles()

        # 2. Type filter
        if vtype:
            vt = common.norm_type(vtype)
            res = [v for v in res if v.type == vt]

        # 3. Make/model filter
        if brand:
            kw = common._lc(brand).strip()
            if kw:
                res = [v for v in res if kw in common._lc(v.make) or kw in common._lc(v.model)]

        # 4. Location filter
        if location:
            loc = common._lc(location).strip()
            res = [v for v in res if common._lc(v.location) == loc]

        # 5. Price range filter
        min_val = to_decimal(min_rate)
        max_val = to_decimal(max_rate)
        if min_val is not None and not min_val.is_finite():
            min_val = None
        if max_val is not None and not max_val.is_finite():
            max_val = None
        if (min_val is not None) and (max_val is not None) and (min_val > max_val):
            min_val, max_val = max_val, min_val

        if (min_val is not None) or (max_val is not None):
            def within(v: Vehicle):
                if not v.has_valid_rate:
                    return False
                if (min_val is not None) and (v.daily_rate < min_val):
                    return False
                if (max_val is not None) and (v.daily_rate > max_val):
                    return False
                return True

            res = [v for v in res if within(v)]

        res.sort(key=lambda v: (v.make.lower(), v.model.lower(), v.vehicle_id))
        return res

    @staticmethod
    def get_vehicle(vid: str, store: Optional["Store"] = None) -> Vehicle:
        """Return a vehicle by ID or raise NotFoundError."""
        st = store or common._store()
        v = st.get_vehicle(vid)
        if v is None:
            raise NotFoundError(f"Error: vehicle with ID '{vid}' not found")
        return v

    @staticmethod
    def create_vehicle(payload: dict, store: Optional["Store"] = None) -> Vehicle:
        st = store or common._store()
        data = _clean_payload(payload)
        vid = st.create_vehicle(data)
        return st.get_vehicle(vid)

    @staticmethod
    def update_vehicle(vid: str, payload: dict, store: Optional["Store"] = None) -> Vehicle:
        st = store or common._store()
        data = _clean_payload(payload, partial=True)
        return st.update_vehicle(vid, **data)

    @staticmethod
    def delete_vehicle(vehicle_id: str, store: Optional["Store"] = None) -> None:
        """
        Delete a vehicle if and only if it exists and no active
        (pending/confirmed) booking references it.
        """
        st = store or common._store()
        with st.vehicle_guard(vehicle_id):
            if st.get_vehicle(vehicle_id) is None:
                raise NotFoundError(f"Error: vehicle with ID '{vehicle_id}' not found")
            if st.find_bookings(vehicle_id=vehicle_id, statuses=ACTIVE_BOOKING_STATES):
                raise ConflictError("Error: cannot delete, active bookings exist")
            st.delete_vehicle(vehicle_id)
