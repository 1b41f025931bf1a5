"""Shared service helpers and dict -> model mappers."""

from typing import Optional

from rental_pricing.models.pricing import PromoDiscount
from rental_pricing.models.rate_card import Car, ExtraPrice, RateCard
from rental_pricing.models.store import Store
from rental_pricing.utils.money import to_decimal


def _store() -> Store:
    """Get the singleton store instance."""
    return Store.instance()


def to_int_safe(value) -> Optional[int]:
    """Safely convert to int; return None if invalid (floats must be whole)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    dec = to_decimal(value)
    if dec is None or dec != dec.to_integral_value():
        return None
    return int(dec)


# -------- dict -> rich model mappers --------
def car_from_dict(d: Optional[dict]) -> Optional[Car]:
    """Map a stored car dict to a Car with its rate card (raises on bad rates)."""
    if not d:
        return None
    return Car(
        car_id=str(d.get("car_id") or d.get("id")),
        brand=d.get("brand") or "",
        model=d.get("model") or "",
        rate_card=RateCard(
            daily_rate=d.get("daily_rate"),
            weekly_rate=d.get("weekly_rate"),
            monthly_rate=d.get("monthly_rate"),
        ),
    )


def extra_from_dict(d: dict) -> ExtraPrice:
    return ExtraPrice(
        extra_id=str(d.get("extra_id") or d.get("id")),
        name=d.get("name") or "",
        daily_price=to_decimal(d.get("daily_price")),
        weekly_price=to_decimal(d.get("weekly_price")),
        monthly_price=to_decimal(d.get("monthly_price")),
    )


def promo_from_dict(d: Optional[dict]) -> Optional[PromoDiscount]:
    if not d:
        return None
    return PromoDiscount(
        code=d.get("code") or "",
        percentage=to_decimal(d.get("percentage")),
        amount=to_decimal(d.get("amount")),
        description=d.get("description") or "",
    )
