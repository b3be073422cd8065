from flask import Blueprint, jsonify, request

from .common import json_body
from ..services.booking_service import BookingArbiter
from ..services.vehicle_service import VehicleService
from ..utils.decorators import admin_required

bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


@bp.get("")
def list_vehicles():
    """Catalog with optional filters. Empty query params are ignored."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    vehicles = VehicleService.filter_vehicles(
        vtype=q.get("type") or None,
        brand=q.get("brand") or None,
        location=q.get("location") or None,
        min_rate=q.get("minPrice") or None,
        max_rate=q.get("maxPrice") or None,
    )
    return jsonify([v.to_dict() for v in vehicles])


@bp.get("/<vid>")
def vehicle_detail(vid):
    return jsonify(VehicleService.get_vehicle(vid).to_dict())


@bp.get("/availability/<vid>")
def availability(vid):
    """
    With ?start=&end= answer whether that range is free.
    Without them, list every blocked (active) range for calendar display.
    """
    start = request.args.get("start")
    end = request.args.get("end")
    arbiter = BookingArbiter()
    if start or end:
        return jsonify(arbiter.check_availability(vid, start, end).to_dict())
    ranges = arbiter.blocked_ranges(vid)
    return jsonify({"unavailableDates": [{"start": s.isoformat(), "end": e.isoformat()} for s, e in ranges]})


@bp.post("")
@admin_required
def create_vehicle():
    vehicle = VehicleService.create_vehicle(json_body())
    return jsonify(vehicle.to_dict()), 201


@bp.put("/<vid>")
@admin_required
def update_vehicle(vid):
    vehicle = VehicleService.update_vehicle(vid, json_body())
    return jsonify(vehicle.to_dict())


@bp.delete("/<vid>")
@admin_required
def delete_vehicle(vid):
    VehicleService.delete_vehicle(vid)
    return jsonify({"message": "Vehicle deleted successfully."})
