"""
Availability gate tests. A car is available when no open/confirmed/in-progress
booking for it overlaps the requested half-open interval.
"""
from datetime import datetime

import pytest
import pytz

from rental_pricing.models.pricing import RentalInterval
from rental_pricing.services.availability import AvailabilityGate


def utc(*args):
    return datetime(*args, tzinfo=pytz.utc)


def seed_booking(store, bid, car_id="1", status="confirmed",
                 start="2030-11-01T10:00:00Z", end="2030-11-05T10:00:00Z"):
    store.create_booking({
        "booking_id": bid,
        "car_id": car_id,
        "start_date": start,
        "end_date": end,
        "status": status,
    })


@pytest.fixture
def gate(store):
    return AvailabilityGate(store)


def test_overlapping_booking_blocks(store, gate):
    seed_booking(store, "b1")
    iv = RentalInterval(utc(2030, 11, 3, 10), utc(2030, 11, 7, 10))
    assert not gate.is_available("1", iv)


def test_touching_booking_does_not_block(store, gate):
    seed_booking(store, "b1")
    iv = RentalInterval(utc(2030, 11, 5, 10), utc(2030, 11, 8, 10))
    assert gate.is_available("1", iv)


def test_enclosing_request_blocks(store, gate):
    seed_booking(store, "b1")
    iv = RentalInterval(utc(2030, 10, 30), utc(2030, 11, 10))
    assert not gate.is_available("1", iv)


@pytest.mark.parametrize("status", ["canceled", "completed", "closed"])
def test_non_blocking_statuses_ignored(store, gate, status):
    seed_booking(store, "b1", status=status)
    iv = RentalInterval(utc(2030, 11, 2), utc(2030, 11, 3))
    assert gate.is_available("1", iv)


@pytest.mark.parametrize("status", ["open", "CONFIRMED", "in_progress"])
def test_blocking_statuses(store, gate, status):
    seed_booking(store, "b1", status=status)
    iv = RentalInterval(utc(2030, 11, 2), utc(2030, 11, 3))
    assert not gate.is_available("1", iv)


def test_other_car_bookings_ignored(store, gate):
    seed_booking(store, "b1", car_id="2")
    iv = RentalInterval(utc(2030, 11, 2), utc(2030, 11, 3))
    assert gate.is_available("1", iv)


def test_excluded_booking_for_modification(store, gate):
    seed_booking(store, "b1")
    iv = RentalInterval(utc(2030, 11, 2), utc(2030, 11, 6))
    assert not gate.is_available("1", iv)
    assert gate.is_available("1", iv, exclude_booking_id="b1")


def test_malformed_booking_skipped(store, gate):
    seed_booking(store, "b1", start="garbage")
    iv = RentalInterval(utc(2030, 11, 2), utc(2030, 11, 3))
    assert gate.is_available("1", iv)
