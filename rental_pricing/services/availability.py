"""Availability gate: is a car free of blocking bookings for an interval."""
import logging
from typing import Iterable, Optional

from ..exceptions import InvalidDateRangeError
from ..models.pricing import RentalInterval
from ..utils.constants import BLOCKING_BOOKING_STATES
from ..utils.dates import parse_instant

logger = logging.getLogger(__name__)


def booking_interval(booking: dict) -> Optional[RentalInterval]:
    """Interval of a stored booking dict, or None if the record is malformed."""
    # Support both start_date/end_date and start/end field names
    s_raw = booking.get("start_date") or booking.get("start")
    e_raw = booking.get("end_date") or booking.get("end")
    if not s_raw or not e_raw:
        return None
    try:
        return RentalInterval(parse_instant(s_raw), parse_instant(e_raw))
    except InvalidDateRangeError:
        return None


def is_blocking(booking: dict) -> bool:
    status_lc = str(booking.get("status") or "").strip().lower()
    return status_lc in BLOCKING_BOOKING_STATES


def find_conflicts(bookings: Iterable[dict], interval: RentalInterval,
                   exclude_booking_id=None) -> list:
    """Blocking bookings overlapping `interval`, other than `exclude_booking_id`."""
    excluded = None if exclude_booking_id is None else str(exclude_booking_id)
    conflicts = []
    for b in bookings:
        if excluded is not None and str(b.get("booking_id")) == excluded:
            continue
        if not is_blocking(b):
            continue
        other = booking_interval(b)
        if other is None:
            logger.warning("Skipping malformed booking record %r", b.get("booking_id"))
            continue
        if interval.overlaps(other):
            conflicts.append(b)
    return conflicts


class AvailabilityGate:
    """
    Synchronous availability check, consulted before any cost is computed.
    `bookings` is any object with bookings_for_car(car_id) -> iterable of booking dicts.
    Holding the car between check and booking write is the booking store's job.
    """

    def __init__(self, bookings):
        self.bookings = bookings

    def is_available(self, car_id, interval: RentalInterval, exclude_booking_id=None) -> bool:
        conflicts = find_conflicts(self.bookings.bookings_for_car(car_id), interval, exclude_booking_id)
        if conflicts:
            logger.info("Car %s has %d conflicting booking(s) for %s -> %s",
                        car_id, len(conflicts), interval.start.isoformat(), interval.end.isoformat())
            return False
        return True
