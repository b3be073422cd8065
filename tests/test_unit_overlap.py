from datetime import date, datetime

import pytest

from rental_api.utils.dates import as_date, overlap


def d(s):
    return date.fromisoformat(s)


def test_touching_ranges_do_not_overlap():
    """A checkout date equal to another checkin date is not a conflict."""
    assert not overlap(d("2024-01-01"), d("2024-01-04"), d("2024-01-04"), d("2024-01-06"))
    assert not overlap(d("2024-01-04"), d("2024-01-06"), d("2024-01-01"), d("2024-01-04"))


def test_partial_day_shared_is_overlap():
    assert overlap(d("2024-01-01"), d("2024-01-04"), d("2024-01-03"), d("2024-01-05"))


def test_containment_and_identity_overlap():
    assert overlap(d("2024-01-01"), d("2024-01-10"), d("2024-01-03"), d("2024-01-04"))
    assert overlap(d("2024-01-03"), d("2024-01-04"), d("2024-01-01"), d("2024-01-10"))
    assert overlap(d("2024-01-01"), d("2024-01-02"), d("2024-01-01"), d("2024-01-02"))


def test_disjoint_ranges_do_not_overlap():
    assert not overlap(d("2024-01-01"), d("2024-01-02"), d("2024-02-01"), d("2024-02-02"))


@pytest.mark.parametrize("raw", [
    "2024-01-03",
    "2024-01-03T23:59:59",
    "2024-01-03T08:00:00Z",
    "2024-01-03 10:15",
    datetime(2024, 1, 3, 18, 30),
    date(2024, 1, 3),
])
def test_as_date_drops_time_of_day(raw):
    assert as_date(raw) == date(2024, 1, 3)


@pytest.mark.parametrize("raw", ["", "03/01/2024", "2024-13-01", None, 20240103])
def test_as_date_rejects_garbage(raw):
    with pytest.raises(ValueError):
        as_date(raw)
