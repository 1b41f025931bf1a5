"""
Validation and lookup failures come back as structured QuoteResults,
distinct from "unavailable", and never as a zero-cost breakdown.
"""
import pytest

from rental_pricing.utils.constants import QuoteStatus

from conftest import NOW


def quote(service, **kwargs):
    params = dict(
        car_id="1",
        start_date="2030-02-01T10:00:00Z",
        end_date="2030-02-04T10:00:00Z",
        pickup_branch_id=1,
        return_branch_id=1,
        now=NOW,
    )
    params.update(kwargs)
    return service.quote_booking_cost(**params)


@pytest.mark.parametrize("kwargs,fragment", [
    ({"end_date": "2030-02-01T10:00:00Z"}, "after start"),
    ({"end_date": "2030-01-30"}, "after start"),
    ({"start_date": "nonsense"}, "invalid date"),
    ({"start_date": "2029-12-31", "end_date": "2030-01-03"}, "past"),
    ({"end_date": "2031-02-05"}, "cannot exceed 365"),
    ({"pickup_branch_id": None}, "branch"),
    ({"loyalty_points_to_redeem": -5}, "negative"),
    ({"loyalty_points_to_redeem": "lots"}, "whole number"),
    ({"loyalty_points_to_redeem": 10.5}, "whole number"),
    ({"extra_ids": [{"id": "1", "quantity": 0}]}, "quantity"),
    ({"extra_ids": [{"id": "1", "quantity": -2}]}, "quantity"),
    ({"extra_ids": "1,2"}, "list"),
    ({"strategy": "greedy"}, "strategy"),
])
def test_invalid_requests(service, kwargs, fragment):
    result = quote(service, **kwargs)
    assert result.status == QuoteStatus.INVALID
    assert result.breakdown is None
    assert fragment in result.message.lower()
    assert result.to_dict() == {"success": False, "message": result.message}


def test_same_day_start_is_allowed(service):
    result = quote(service, start_date="2030-01-01T08:00:00Z", end_date="2030-01-02T08:00:00Z")
    assert result.ok


def test_unknown_car(service):
    result = quote(service, car_id="999")
    assert result.status == QuoteStatus.NOT_FOUND
    assert result.breakdown is None
    assert result.message == "Car not found"


def test_modification_flow_excludes_own_booking(service, store):
    bid = store.create_booking({
        "car_id": "1", "status": "confirmed",
        "start_date": "2030-02-01T10:00:00Z", "end_date": "2030-02-03T10:00:00Z",
    })
    assert quote(service).status == QuoteStatus.UNAVAILABLE
    assert quote(service, exclude_booking_id=bid).ok


@pytest.mark.parametrize("rates", [
    {"daily_rate": "100", "weekly_rate": "600"},
    {"daily_rate": "0", "weekly_rate": "600", "monthly_rate": "2000"},
    {"daily_rate": "100", "weekly_rate": "-5", "monthly_rate": "2000"},
])
def test_car_with_unusable_rate_card(service, store, rates):
    store.create_car(dict(car_id="9", brand="Kia", model="Rio", **rates))
    result = quote(service, car_id="9")
    assert result.status == QuoteStatus.INVALID
    assert result.breakdown is None
    assert "positive amount" in result.message
