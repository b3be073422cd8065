"""Payment intents and capture callbacks. No provider protocol lives here."""
from __future__ import annotations

import logging
import uuid

from . import common
from .booking_service import BookingArbiter
from ..exceptions import ForbiddenError, InvalidStateError, NotFoundError
from ..models.payment import Payment
from ..utils.constants import BookingStatus, PaymentStatus

log = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, store=None, arbiter: BookingArbiter | None = None):
        self.store = store if store is not None else common._store()
        self.arbiter = arbiter or BookingArbiter(self.store)

    def create_intent(self, booking_id, actor_id) -> Payment:
        """
        Record a payment intent for the renter's own pending booking.
        The amount is the booking's server-computed total, never a client value.
        """
        booking = self.store.get_booking(str(booking_id))
        if booking is None:
            raise NotFoundError(f"Error: booking '{booking_id}' not found")
        if booking.renter_id != str(actor_id):
            raise ForbiddenError()
        if booking.status != BookingStatus.PENDING:
            raise InvalidStateError(f"Error: booking is {booking.status}, payment not allowed")

        record = self.store.create_payment({
            "booking_id": booking.booking_id,
            "user_id": booking.renter_id,
            "amount": str(booking.total_price),
            "transaction_id": f"txn_{uuid.uuid4().hex}",
            "status": PaymentStatus.PENDING,
        })
        return Payment.from_dict(record)

    def handle_capture(self, transaction_id: str, succeeded: bool) -> Payment:
        """
        Provider callback. A successful capture completes the payment and
        confirms its booking; a failed one only marks the payment failed.
        """
        record = self.store.find_payment(transaction_id)
        if record is None:
            raise NotFoundError(f"Error: payment '{transaction_id}' not found")
        if record["status"] != PaymentStatus.PENDING:
            raise InvalidStateError(f"Error: payment already {record['status']}")

        pending = {PaymentStatus.PENDING}
        if not succeeded:
            record = self.store.update_payment(record["payment_id"], expected=pending, status=PaymentStatus.FAILED)
            log.warning("Payment %s failed for booking %s", transaction_id, record["booking_id"])
            return Payment.from_dict(record)

        record = self.store.update_payment(record["payment_id"], expected=pending, status=PaymentStatus.COMPLETED)
        try:
            self.arbiter.confirm_booking(record["booking_id"])
        except (InvalidStateError, NotFoundError):
            # payment stays pending if the booking can no longer be confirmed
            self.store.update_payment(record["payment_id"], expected={PaymentStatus.COMPLETED},
                                      status=PaymentStatus.PENDING)
            raise
        log.info("Payment %s captured; booking %s confirmed", transaction_id, record["booking_id"])
        return Payment.from_dict(record)
