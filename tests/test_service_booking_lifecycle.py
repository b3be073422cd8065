"""
Booking status machine: pending -> confirmed, pending|confirmed -> cancelled,
nothing leaves cancelled. Plus owner/admin rights on read and cancel.
"""
import pytest

from rental_api.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from rental_api.utils.constants import BookingStatus


@pytest.fixture
def booking(arbiter, vehicle_id):
    return arbiter.create_booking(vehicle_id, "owner", "2024-01-01", "2024-01-04")


def test_owner_can_cancel(arbiter, booking):
    b = arbiter.cancel_booking(booking.booking_id, "owner", False)
    assert b.status == BookingStatus.CANCELLED
    assert b.cancelled_at


def test_admin_can_cancel_any_booking(arbiter, booking):
    b = arbiter.cancel_booking(booking.booking_id, "someone-else", True)
    assert b.status == BookingStatus.CANCELLED


def test_stranger_cannot_cancel(arbiter, booking, store):
    with pytest.raises(ForbiddenError):
        arbiter.cancel_booking(booking.booking_id, "stranger", False)
    assert store.get_booking(booking.booking_id).status == BookingStatus.PENDING


def test_second_cancel_is_an_error(arbiter, booking):
    arbiter.cancel_booking(booking.booking_id, "owner", False)
    with pytest.raises(InvalidStateError):
        arbiter.cancel_booking(booking.booking_id, "owner", False)


def test_cancel_unknown_booking(arbiter):
    with pytest.raises(NotFoundError):
        arbiter.cancel_booking("missing", "owner", True)


def test_confirm_pending(arbiter, booking):
    b = arbiter.confirm_booking(booking.booking_id)
    assert b.status == BookingStatus.CONFIRMED
    assert b.confirmed_at


def test_confirmed_can_still_be_cancelled(arbiter, booking):
    arbiter.confirm_booking(booking.booking_id)
    b = arbiter.cancel_booking(booking.booking_id, "owner", False)
    assert b.status == BookingStatus.CANCELLED


def test_confirm_twice_is_rejected(arbiter, booking):
    arbiter.confirm_booking(booking.booking_id)
    with pytest.raises(InvalidStateError):
        arbiter.confirm_booking(booking.booking_id)


def test_cancelled_is_terminal(arbiter, booking):
    arbiter.cancel_booking(booking.booking_id, "owner", False)
    with pytest.raises(InvalidStateError):
        arbiter.confirm_booking(booking.booking_id)


def test_confirm_unknown_booking(arbiter):
    with pytest.raises(NotFoundError):
        arbiter.confirm_booking("missing")


def test_dates_and_vehicle_never_change(arbiter, booking):
    arbiter.confirm_booking(booking.booking_id)
    after = arbiter.cancel_booking(booking.booking_id, "owner", False)
    assert (after.vehicle_id, after.start_date, after.end_date, after.total_price) == \
        (booking.vehicle_id, booking.start_date, booking.end_date, booking.total_price)


def test_get_booking_rights(arbiter, booking):
    assert arbiter.get_booking(booking.booking_id, "owner").booking_id == booking.booking_id
    assert arbiter.get_booking(booking.booking_id, "admin-id", True).booking_id == booking.booking_id
    with pytest.raises(ForbiddenError):
        arbiter.get_booking(booking.booking_id, "stranger")


def test_list_bookings_scopes_by_actor(arbiter, vehicle_id, booking):
    arbiter.create_booking(vehicle_id, "other", "2024-02-01", "2024-02-03")

    mine = arbiter.list_bookings("owner")
    assert [b.renter_id for b in mine] == ["owner"]

    everything = arbiter.list_bookings("admin-id", True)
    assert len(everything) == 2
    # newest start first
    assert everything[0].start_date > everything[1].start_date
