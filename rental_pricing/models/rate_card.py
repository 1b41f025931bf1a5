from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..exceptions import InvalidRateInputError
from ..utils.money import ZERO, to_decimal


def _positive(name: str, value) -> Decimal:
    dec = to_decimal(value)
    if dec is None or dec <= ZERO:
        raise InvalidRateInputError(f"{name} must be a positive amount")
    return dec


@dataclass(frozen=True)
class RateCard:
    """
    Tiered price list of a car: one price per day, per 7-day week and per 30-day month.
    Tier prices are independent of each other, a month is not 30 days' worth of daily rate.
    """
    daily_rate: Decimal
    weekly_rate: Decimal
    monthly_rate: Decimal

    def __post_init__(self):
        object.__setattr__(self, "daily_rate", _positive("Daily rate", self.daily_rate))
        object.__setattr__(self, "weekly_rate", _positive("Weekly rate", self.weekly_rate))
        object.__setattr__(self, "monthly_rate", _positive("Monthly rate", self.monthly_rate))

    def scaled(self, quantity: int) -> "RateCard":
        """Same card with every tier multiplied by `quantity`."""
        return RateCard(
            daily_rate=self.daily_rate * quantity,
            weekly_rate=self.weekly_rate * quantity,
            monthly_rate=self.monthly_rate * quantity,
        )


@dataclass(frozen=True)
class Car:
    """A rentable car as far as pricing is concerned."""
    car_id: str
    brand: str
    model: str
    rate_card: RateCard

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}".strip()


@dataclass(frozen=True)
class ExtraPrice:
    """
    Catalogue price of an extra (GPS, child seat, ...).
    Weekly/monthly prices are optional; quotes bill extras per day.
    """
    extra_id: str
    name: str
    daily_price: Decimal
    weekly_price: Optional[Decimal] = None
    monthly_price: Optional[Decimal] = None
