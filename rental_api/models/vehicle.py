from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..utils.money import to_decimal, is_positive_finite


@dataclass
class Vehicle:
    """
    Catalog entry. `daily_rate` is the listed price per rental day and is the
    only field the booking arbiter reads. A malformed stored rate is kept as
    None (or a non-finite Decimal) so pricing can refuse it instead of
    silently quoting zero.
    """
    vehicle_id: str
    make: str
    model: str
    year: Optional[int] = None
    type: str = "car"
    daily_rate: Optional[Decimal] = None
    description: str = ""
    location: str = ""
    images: list = field(default_factory=list)
    owner_id: Optional[str] = None

    @property
    def has_valid_rate(self) -> bool:
        return is_positive_finite(self.daily_rate)

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        return cls(
            vehicle_id=str(d.get("vehicle_id") or d.get("id")),
            make=d.get("make") or "",
            model=d.get("model") or "",
            year=d.get("year"),
            type=(d.get("type") or "car").lower(),
            daily_rate=to_decimal(d.get("daily_rate")),
            description=d.get("description") or "",
            location=d.get("location") or "",
            images=list(d.get("images") or []),
            owner_id=d.get("owner_id"),
        )

    def to_dict(self) -> dict:
        rate = self.daily_rate
        return {
            "vehicleId": self.vehicle_id,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "type": self.type,
            "dailyRate": float(rate) if rate is not None and rate.is_finite() else None,
            "description": self.description,
            "location": self.location,
            "images": list(self.images),
            "ownerId": self.owner_id,
        }
