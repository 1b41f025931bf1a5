from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytz

from rental_pricing.exceptions import InvalidDateRangeError, InvalidRateInputError
from rental_pricing.models.config import PricingConfig
from rental_pricing.models.pricing import LoyaltyRedemption, PromoDiscount, RentalInterval
from rental_pricing.models.rate_card import RateCard
from rental_pricing.utils.dates import parse_instant
from rental_pricing.utils.money import round_money, to_decimal

T0 = datetime(2030, 3, 1, 10, 0, tzinfo=pytz.utc)


@pytest.mark.parametrize("delta,days,hours", [
    (timedelta(minutes=1), 1, 1),
    (timedelta(hours=24), 1, 24),
    (timedelta(hours=25), 2, 25),
    (timedelta(days=3), 3, 72),
    (timedelta(days=6, hours=23, minutes=30), 7, 168),
])
def test_interval_days_round_up(delta, days, hours):
    iv = RentalInterval(T0, T0 + delta)
    assert iv.total_days == days
    assert iv.total_hours == hours


@pytest.mark.parametrize("end", [T0, T0 - timedelta(hours=1)])
def test_interval_requires_start_before_end(end):
    with pytest.raises(InvalidDateRangeError):
        RentalInterval(T0, end)


def test_overlap_is_half_open():
    a = RentalInterval(T0, T0 + timedelta(days=4))
    assert a.overlaps(RentalInterval(T0 + timedelta(days=2), T0 + timedelta(days=6)))
    assert a.overlaps(RentalInterval(T0 - timedelta(days=1), T0 + timedelta(days=5)))
    # touching: one ends exactly when the other starts
    assert not a.overlaps(RentalInterval(T0 + timedelta(days=4), T0 + timedelta(days=5)))
    assert not a.overlaps(RentalInterval(T0 - timedelta(days=1), T0))


def test_parse_instant_variants():
    assert parse_instant("2030-03-01") == datetime(2030, 3, 1, tzinfo=pytz.utc)
    assert parse_instant("2030-03-01T10:00:00Z") == T0
    assert parse_instant("2030-03-01 13:00:00+03:00") == T0
    riyadh = pytz.timezone("Asia/Riyadh").localize(datetime(2030, 3, 1, 13, 0))
    assert parse_instant(riyadh) == T0
    with pytest.raises(InvalidDateRangeError):
        parse_instant("not-a-date")
    with pytest.raises(InvalidDateRangeError):
        parse_instant(None)


def test_money_helpers():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("abc") is None
    assert to_decimal(True) is None
    assert round_money(Decimal("105.975")) == Decimal("105.98")
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")


def test_rate_card_rejects_non_positive_rates():
    with pytest.raises(InvalidRateInputError):
        RateCard("0", "600", "2000")
    card = RateCard("100", "600.5", 2000)
    assert card.weekly_rate == Decimal("600.5")
    assert card.scaled(3).monthly_rate == Decimal("6000")


def test_redemption_clamps_to_requested_available_and_cap():
    r = LoyaltyRedemption(points_requested=10000, points_available=500,
                          point_value=Decimal("0.1"), max_redemption_percentage=Decimal("50"))
    subtotal = Decimal("375")
    assert r.cap_from_percentage(subtotal) == 1875
    assert r.points_applied(subtotal) == 500
    assert r.discount_value(500) == Decimal("50.0")

    r = LoyaltyRedemption(5000, 5000, Decimal("0.1"), Decimal("50"))
    assert r.points_applied(subtotal) == 1875
    # never more than what is left of the subtotal
    assert r.points_applied(subtotal, remaining=Decimal("12.34")) == 123
    assert r.points_applied(subtotal, remaining=Decimal("0")) == 0


@pytest.mark.parametrize("requested", [0, 1, 7, 499, 500, 1875, 1876, 100000])
def test_redemption_never_exceeds_any_bound(requested):
    r = LoyaltyRedemption(requested, 1000, Decimal("0.25"), Decimal("30"))
    subtotal = Decimal("999.99")
    applied = r.points_applied(subtotal)
    assert applied <= min(requested, 1000, r.cap_from_percentage(subtotal))
    assert r.discount_value(applied) <= subtotal * Decimal("0.30")


def test_promo_amount_for():
    assert PromoDiscount("P10", percentage=Decimal("10")).amount_for(Decimal("375")) == Decimal("37.5")
    assert PromoDiscount("F50", amount=Decimal("50")).amount_for(Decimal("375")) == Decimal("50")


def test_config_long_term_single_highest_tier():
    cfg = PricingConfig()
    assert cfg.long_term_percentage(6) == Decimal("0")
    assert cfg.long_term_percentage(7) == Decimal("10")
    assert cfg.long_term_percentage(29) == Decimal("10")
    assert cfg.long_term_percentage(30) == Decimal("15")
    assert cfg.long_term_percentage(365) == Decimal("15")


def test_config_from_mapping():
    cfg = PricingConfig.from_mapping({
        "PRICING_TAX_PERCENTAGE": 5,
        "PRICING_DELIVERY_FEE": "75.5",
        "PRICING_LONG_TERM_TIERS": {"14": 12, "3": "2.5"},
        "PRICING_DEFAULT_STRATEGY": "Optimized",
        "PRICING_CURRENCY": "USD",
        "UNRELATED": "ignored",
    })
    assert cfg.tax_percentage == Decimal("5")
    assert cfg.delivery_fee == Decimal("75.5")
    assert cfg.long_term_tiers == ((14, Decimal("12")), (3, Decimal("2.5")))
    assert cfg.default_strategy == "optimized"
    assert cfg.currency == "USD"
    assert cfg.insurance_percentage == Decimal("5")


@pytest.mark.parametrize("changes", [
    {"tax_percentage": "-1"},
    {"loyalty_point_value": 0},
    {"max_loyalty_redemption_percentage": 120},
    {"default_strategy": "greedy"},
    {"long_term_tiers": ((0, 10),)},
    {"max_rental_days": 0},
])
def test_config_rejects_bad_values(changes):
    with pytest.raises(ValueError):
        PricingConfig(**changes)
