# rental_api/utils/constants.py

"""
Global constants for roles, statuses and date handling.
These constants are imported by both models and services.
"""

# Date format (used for booking start/end)
DATE_FMT = "%Y-%m-%d"


class Role:
    CUSTOMER = "customer"
    ADMIN = "admin"


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus:
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# Only these count toward overlap conflicts
ACTIVE_BOOKING_STATES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

# from-state -> allowed to-states
BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}

# --- Misc ---
ALLOWED_TYPES = {"car", "motorbike", "truck", "van", "suv"}
