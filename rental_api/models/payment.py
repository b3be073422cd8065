from dataclasses import dataclass
from decimal import Decimal

from ..utils.constants import PaymentStatus
from ..utils.money import to_decimal


@dataclass
class Payment:
    """A payment intent recorded against one booking."""
    payment_id: str
    booking_id: str
    user_id: str
    amount: Decimal
    transaction_id: str
    status: str = PaymentStatus.PENDING

    @classmethod
    def from_dict(cls, d: dict) -> "Payment":
        return cls(
            payment_id=d["payment_id"],
            booking_id=d["booking_id"],
            user_id=d["user_id"],
            amount=to_decimal(d.get("amount")) or Decimal("0"),
            transaction_id=d["transaction_id"],
            status=d.get("status") or PaymentStatus.PENDING,
        )

    def to_dict(self) -> dict:
        return {
            "paymentId": self.payment_id,
            "bookingId": self.booking_id,
            "userId": self.user_id,
            "amount": float(self.amount),
            "amountCents": int(self.amount * 100),
            "transactionId": self.transaction_id,
            "status": self.status,
        }
