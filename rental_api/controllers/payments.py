from flask import Blueprint, current_app, jsonify, request

from .common import json_body, require
from ..services.payment_service import PaymentService
from ..utils.decorators import login_required, current_actor
from ..utils.security import secrets_match

bp = Blueprint("payments", __name__, url_prefix="/api/payments")

WEBHOOK_HEADER = "X-Webhook-Secret"
CAPTURE_SUCCEEDED = "payment.succeeded"
CAPTURE_FAILED = "payment.failed"


@bp.post("/intent")
@login_required
def create_intent():
    (booking_id,) = require(json_body(), "bookingId")
    uid, _ = current_actor()
    payment = PaymentService().create_intent(booking_id, uid)
    return jsonify(payment.to_dict()), 201


@bp.post("/webhook")
def webhook():
    """
    Capture callback from the payment processor.
    Body: {"type": "payment.succeeded" | "payment.failed", "transactionId": "..."}
    """
    if not secrets_match(request.headers.get(WEBHOOK_HEADER), current_app.config.get("PAYMENT_WEBHOOK_SECRET")):
        return jsonify({"message": "Invalid webhook signature"}), 400

    data = json_body()
    event_type, txn = require(data, "type", "transactionId")
    if event_type not in (CAPTURE_SUCCEEDED, CAPTURE_FAILED):
        # unrelated event types are acknowledged and ignored
        return jsonify({"received": True})

    payment = PaymentService().handle_capture(txn, succeeded=(event_type == CAPTURE_SUCCEEDED))
    return jsonify({"received": True, "payment": payment.to_dict()})
