from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ..utils.constants import ACTIVE_BOOKING_STATES, BookingStatus
from ..utils.dates import as_date, overlap
from ..utils.money import to_decimal


@dataclass(frozen=True)
class Booking:
    """
    A reservation of one vehicle over the half-open range [start_date, end_date).
    `total_price` is always computed server-side at creation time.
    Instances are immutable; status changes go through the store and come
    back as a new object.
    """
    booking_id: Optional[str]
    vehicle_id: str
    renter_id: str
    start_date: date
    end_date: date
    total_price: Decimal
    status: str = BookingStatus.PENDING
    created_at: Optional[str] = None
    confirmed_at: Optional[str] = None
    cancelled_at: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATES

    @property
    def rental_days(self) -> int:
        return (self.end_date - self.start_date).days

    def overlaps(self, start: date, end: date) -> bool:
        return overlap(self.start_date, self.end_date, start, end)

    def with_changes(self, **changes) -> "Booking":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, d: dict) -> "Booking":
        return cls(
            booking_id=d.get("booking_id"),
            vehicle_id=str(d["vehicle_id"]),
            renter_id=str(d["renter_id"]),
            start_date=as_date(d["start_date"]),
            end_date=as_date(d["end_date"]),
            total_price=to_decimal(d.get("total_price")) or Decimal("0"),
            status=d.get("status") or BookingStatus.PENDING,
            created_at=d.get("created_at"),
            confirmed_at=d.get("confirmed_at"),
            cancelled_at=d.get("cancelled_at"),
        )

    def to_record(self) -> dict:
        """Storage shape (snake_case, ISO dates, Decimal kept as str)."""
        return {
            "booking_id": self.booking_id,
            "vehicle_id": self.vehicle_id,
            "renter_id": self.renter_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_price": str(self.total_price),
            "status": self.status,
            "created_at": self.created_at,
            "confirmed_at": self.confirmed_at,
            "cancelled_at": self.cancelled_at,
        }

    def to_dict(self) -> dict:
        """Wire shape returned by the API."""
        return {
            "bookingId": self.booking_id,
            "vehicleId": self.vehicle_id,
            "renterId": self.renter_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "rentalDays": self.rental_days,
            "totalPrice": float(self.total_price),
            "status": self.status,
            "createdAt": self.created_at,
            "confirmedAt": self.confirmed_at,
            "cancelledAt": self.cancelled_at,
        }
