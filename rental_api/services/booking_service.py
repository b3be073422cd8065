"""
Booking arbiter: availability, pricing and the booking status lifecycle.

All decisions about whether a vehicle can be booked for a date range, and
for how much, are made here. Controllers only translate wire requests into
calls on BookingArbiter and its results (or exceptions) back into JSON.

Failures are raised as the typed errors in rental_api.exceptions. They are
expected outcomes, so nothing here logs or retries them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from . import common
from ..exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidPricingError,
    InvalidRangeError,
    InvalidStateError,
    NotFoundError,
)
from ..models.booking import Booking
from ..models.store import Store
from ..utils.constants import ACTIVE_BOOKING_STATES, BOOKING_TRANSITIONS, BookingStatus
from ..utils.dates import as_date, utc_now_iso
from ..utils.money import round2

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflicts: list = field(default_factory=list)  # [(start, end)] sorted by start

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "conflicts": [{"start": s.isoformat(), "end": e.isoformat()} for s, e in self.conflicts],
        }


@dataclass(frozen=True)
class PriceQuote:
    vehicle_id: str
    start_date: date
    end_date: date
    rental_days: int
    daily_rate: Decimal
    total_price: Decimal

    def to_dict(self) -> dict:
        return {
            "vehicleId": self.vehicle_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "rentalDays": self.rental_days,
            "dailyRate": float(self.daily_rate),
            "totalPrice": float(self.total_price),
        }


def parse_range(start, end) -> tuple[date, date]:
    """Coerce both ends to calendar dates and require start < end."""
    try:
        d1 = as_date(start)
        d2 = as_date(end)
    except (TypeError, ValueError):
        raise InvalidRangeError("Error: dates must be YYYY-MM-DD")
    if d2 <= d1:
        raise InvalidRangeError("Error: end date must be after start date")
    return d1, d2


class BookingArbiter:
    """
    Availability checks, price quotes and booking state changes for one store.

    `store` defaults to the store bound to the current app; `today` is a
    zero-argument callable returning the business date (defaults to the
    configured timezone's current date).
    """

    def __init__(self, store: Optional[Store] = None, today: Optional[Callable[[], date]] = None):
        self.store = store if store is not None else common._store()
        self._today = today

    def today(self) -> date:
        return (self._today or common._today)()

    # ---------- queries ----------
    def check_availability(self, vehicle_id, start_date, end_date) -> AvailabilityResult:
        """
        Is [start_date, end_date) free of active bookings on this vehicle?
        The vehicle need not exist, and past dates are allowed (read-only lookup).
        """
        d1, d2 = parse_range(start_date, end_date)
        active = self.store.find_bookings(vehicle_id=str(vehicle_id), statuses=ACTIVE_BOOKING_STATES)
        conflicts = [(b.start_date, b.end_date) for b in active if b.overlaps(d1, d2)]
        return AvailabilityResult(available=not conflicts, conflicts=conflicts)

    def price_quote(self, vehicle_id, start_date, end_date) -> PriceQuote:
        """
        Price a rental: whole calendar days times the vehicle's daily rate.
        Past dates are rejected against today's date (day granularity).
        """
        vehicle = self.store.get_vehicle(str(vehicle_id))
        if vehicle is None:
            raise NotFoundError(f"Error: vehicle '{vehicle_id}' not found")

        d1, d2 = parse_range(start_date, end_date)
        today = self.today()
        if d1 < today or d2 < today:
            raise InvalidRangeError("Error: booking dates cannot be in the past")

        if not vehicle.has_valid_rate:
            raise InvalidPricingError(
                f"Error: vehicle '{vehicle.vehicle_id}' has invalid daily rate {vehicle.daily_rate!r}")

        days = (d2 - d1).days
        return PriceQuote(
            vehicle_id=vehicle.vehicle_id,
            start_date=d1,
            end_date=d2,
            rental_days=days,
            daily_rate=vehicle.daily_rate,
            total_price=round2(vehicle.daily_rate * days),
        )

    def blocked_ranges(self, vehicle_id) -> list[tuple[date, date]]:
        """Active booking intervals for a vehicle, for calendar display."""
        active = self.store.find_bookings(vehicle_id=str(vehicle_id), statuses=ACTIVE_BOOKING_STATES)
        return [(b.start_date, b.end_date) for b in active]

    def get_booking(self, booking_id, actor_id, actor_is_admin: bool = False) -> Booking:
        booking = self._require(booking_id)
        if booking.renter_id != str(actor_id) and not actor_is_admin:
            raise ForbiddenError()
        return booking

    def list_bookings(self, actor_id, actor_is_admin: bool = False) -> list[Booking]:
        """Admins see every booking, renters only their own. Newest start first."""
        renter = None if actor_is_admin else str(actor_id)
        rows = self.store.find_bookings(renter_id=renter)
        rows.sort(key=lambda b: b.start_date, reverse=True)
        return rows

    # ---------- commands ----------
    def create_booking(self, vehicle_id, renter_id, start_date, end_date) -> Booking:
        """
        Quote, check and insert a pending booking as one step per vehicle.
        The per-vehicle guard serializes concurrent requests; the store's
        exclusion check on insert is the final word on overlaps.
        """
        vid = str(vehicle_id)
        with self.store.vehicle_guard(vid):
            quote = self.price_quote(vid, start_date, end_date)
            availability = self.check_availability(vid, quote.start_date, quote.end_date)
            if not availability.available:
                raise ConflictError(conflicts=availability.conflicts)

            booking = self.store.insert_booking(Booking(
                booking_id=None,
                vehicle_id=vid,
                renter_id=str(renter_id),
                start_date=quote.start_date,
                end_date=quote.end_date,
                total_price=quote.total_price,
                status=BookingStatus.PENDING,
            ))
        log.info("Booking %s created for vehicle %s (%s -> %s)",
                 booking.booking_id, vid, booking.start_date, booking.end_date)
        return booking

    def cancel_booking(self, booking_id, actor_id, actor_is_admin: bool = False) -> Booking:
        """Owner or admin cancels; a second cancel is an error, not a no-op."""
        booking = self._require(booking_id)
        if booking.renter_id != str(actor_id) and not actor_is_admin:
            raise ForbiddenError()
        return self._transition(booking, BookingStatus.CANCELLED, cancelled_at=utc_now_iso())

    def confirm_booking(self, booking_id) -> Booking:
        """Payment captured: pending -> confirmed."""
        booking = self._require(booking_id)
        return self._transition(booking, BookingStatus.CONFIRMED, confirmed_at=utc_now_iso())

    # ---------- internals ----------
    def _require(self, booking_id) -> Booking:
        booking = self.store.get_booking(str(booking_id))
        if booking is None:
            raise NotFoundError(f"Error: booking '{booking_id}' not found")
        return booking

    def _transition(self, booking: Booking, new_status: str, **stamps) -> Booking:
        sources = {s for s, targets in BOOKING_TRANSITIONS.items() if new_status in targets}
        if booking.status not in sources:
            raise InvalidStateError(f"Error: booking is {booking.status}, cannot move to {new_status}")
        # store re-checks the source state under its lock
        updated = self.store.update_booking_status(
            booking.booking_id, new_status, expected=sources, **stamps)
        log.info("Booking %s %s -> %s", booking.booking_id, booking.status, new_status)
        return updated
