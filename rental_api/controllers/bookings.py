from flask import Blueprint, jsonify, request

from .common import json_body, require
from ..services.booking_service import BookingArbiter
from ..utils.decorators import login_required, current_actor

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bp.get("/quote")
def quote():
    q = request.args
    vehicle_id, start, end = require(q, "vehicleId", "startDate", "endDate")
    return jsonify(BookingArbiter().price_quote(vehicle_id, start, end).to_dict())


@bp.post("")
@login_required
def create_booking():
    """Create a pending booking for the current user. Any totalPrice in the body is ignored."""
    data = json_body()
    vehicle_id, start, end = require(data, "vehicleId", "startDate", "endDate")
    uid, _ = current_actor()
    booking = BookingArbiter().create_booking(vehicle_id, uid, start, end)
    return jsonify({"message": "Booking created", "booking": booking.to_dict()}), 201


@bp.get("")
@login_required
def list_bookings():
    uid, is_admin = current_actor()
    rows = BookingArbiter().list_bookings(uid, is_admin)
    return jsonify([b.to_dict() for b in rows])


@bp.get("/<bid>")
@login_required
def booking_detail(bid):
    uid, is_admin = current_actor()
    return jsonify(BookingArbiter().get_booking(bid, uid, is_admin).to_dict())


@bp.put("/<bid>/cancel")
@login_required
def cancel_booking(bid):
    uid, is_admin = current_actor()
    booking = BookingArbiter().cancel_booking(bid, uid, is_admin)
    return jsonify({"message": "Booking cancelled", "booking": booking.to_dict()})
