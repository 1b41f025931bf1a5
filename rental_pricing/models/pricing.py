"""
Value types shared by the optimizer, the pipeline and the controllers.

Amounts are kept at full Decimal precision while a quote is being computed;
CostBreakdown only ever holds surfaced (rounded) values.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from typing import List, Optional

from ..exceptions import InvalidDateRangeError
from ..utils.constants import DAYS_IN_MONTH, DAYS_IN_WEEK, QuoteStatus
from ..utils.money import ZERO, percent_of


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


@dataclass(frozen=True)
class RentalInterval:
    """
    Half-open rental window [start, end). Duration is billed in whole days, rounded up.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.start < self.end:
            raise InvalidDateRangeError("End date must be after start date")

    @property
    def total_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    @property
    def total_hours(self) -> int:
        return math.ceil(self.total_seconds / 3600)

    @property
    def total_days(self) -> int:
        # ceil(hours / 24); a 25-hour rental is 2 days
        return max(1, math.ceil(self.total_seconds / 86400))

    def overlaps(self, other: "RentalInterval") -> bool:
        """
        Overlap rule for [s1, e1) and [s2, e2): s1 < e2 and s2 < e1.
        Touching intervals (one ends when the other starts) do not overlap.
        """
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class PeriodDecomposition:
    months: int = 0
    weeks: int = 0
    days: int = 0
    monthly_cost: Decimal = ZERO
    weekly_cost: Decimal = ZERO
    daily_cost: Decimal = ZERO

    @property
    def covered_days(self) -> int:
        return DAYS_IN_MONTH * self.months + DAYS_IN_WEEK * self.weeks + self.days

    @property
    def period_count(self) -> int:
        return self.months + self.weeks + self.days

    @property
    def total_cost(self) -> Decimal:
        return self.monthly_cost + self.weekly_cost + self.daily_cost

    @property
    def description(self) -> str:
        parts = []
        if self.months:
            parts.append(_plural(self.months, "month"))
        if self.weeks:
            parts.append(_plural(self.weeks, "week"))
        if self.days:
            parts.append(_plural(self.days, "day"))
        return " + ".join(parts) if parts else "No periods"

    def to_dict(self) -> dict:
        return {
            "monthlyPeriods": self.months,
            "monthlyCost": self.monthly_cost,
            "weeklyPeriods": self.weeks,
            "weeklyCost": self.weekly_cost,
            "dailyPeriods": self.days,
            "dailyCost": self.daily_cost,
            "coveredDays": self.covered_days,
            "description": self.description,
        }


@dataclass(frozen=True)
class RateQuote:
    """Optimizer output: cheapest cost covering `total_days` and how it is made up."""
    total_days: int
    min_cost: Decimal
    decomposition: PeriodDecomposition

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "totalCost": self.min_cost,
            "breakdown": self.decomposition.to_dict(),
        }


@dataclass(frozen=True)
class RateComparison:
    standard_cost: Decimal
    optimized_cost: Decimal
    optimized: RateQuote

    @property
    def savings(self) -> Decimal:
        return self.standard_cost - self.optimized_cost

    @property
    def is_optimized(self) -> bool:
        return self.savings > ZERO

    def to_dict(self) -> dict:
        return {
            "standardCalculation": self.standard_cost,
            "optimizedCalculation": self.optimized_cost,
            "savings": self.savings,
            "isOptimized": self.is_optimized,
            "optimizedBreakdown": self.optimized.decomposition.to_dict(),
        }


@dataclass(frozen=True)
class ExtraLineItem:
    """An extra billed per day for the same number of days as the car."""
    extra_id: str
    name: str
    unit_daily_price: Decimal
    quantity: int
    total_days: int

    @property
    def total_cost(self) -> Decimal:
        return self.unit_daily_price * self.total_days * self.quantity


@dataclass(frozen=True)
class DiscountEntry:
    kind: str
    name: str
    amount: Decimal
    percentage: Optional[Decimal] = None
    description: str = ""


@dataclass(frozen=True)
class PromoDiscount:
    """What the promo-code collaborator hands back: a percentage or a fixed amount."""
    code: str
    percentage: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    description: str = ""

    def amount_for(self, subtotal: Decimal) -> Decimal:
        if self.percentage is not None:
            return percent_of(subtotal, self.percentage)
        return self.amount or ZERO


@dataclass(frozen=True)
class LoyaltyRedemption:
    """
    Bounded loyalty-point redemption. Over-requests are clamped, never rejected.
    """
    points_requested: int
    points_available: int
    point_value: Decimal
    max_redemption_percentage: Decimal

    def cap_from_percentage(self, subtotal: Decimal) -> int:
        """floor(subtotal * maxPct / pointValue): the most points the cap lets through."""
        max_value = percent_of(subtotal, self.max_redemption_percentage)
        return int((max_value / self.point_value).to_integral_value(rounding=ROUND_FLOOR))

    def points_applied(self, subtotal: Decimal, remaining: Optional[Decimal] = None) -> int:
        """
        min(requested, available, cap); when `remaining` is given, also no more
        points than it takes to use up what is left of the subtotal.
        """
        applied = min(
            max(0, self.points_requested),
            max(0, self.points_available),
            self.cap_from_percentage(subtotal),
        )
        if remaining is not None:
            left = int((max(remaining, ZERO) / self.point_value).to_integral_value(rounding=ROUND_FLOOR))
            applied = min(applied, left)
        return max(0, applied)

    def discount_value(self, points_applied: int) -> Decimal:
        return self.point_value * points_applied


@dataclass(frozen=True)
class CostBreakdown:
    """Fully itemized, surfaced quote. All monetary fields are rounded and non-negative."""
    car_id: str
    car_name: str
    start_date: datetime
    end_date: datetime
    total_days: int
    total_hours: int
    strategy: str
    base_rate_per_day: Decimal
    base_rate_per_hour: Decimal
    base_cost: Decimal
    extras: List[dict]
    total_extras_cost: Decimal
    delivery_fee: Decimal
    return_fee: Decimal
    insurance_fee: Decimal
    subtotal: Decimal
    discounts: List[DiscountEntry]
    total_discount_amount: Decimal
    loyalty_points_to_redeem: int
    loyalty_points_discount: Decimal
    total_after_discounts: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    final_amount: Decimal
    loyalty_points_to_earn: int
    currency: str
    calculated_at: datetime
    rate_breakdown: Optional[PeriodDecomposition] = None
    is_available: bool = True

    def to_dict(self) -> dict:
        return {
            "carId": self.car_id,
            "carName": self.car_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalDays": self.total_days,
            "totalHours": self.total_hours,
            "pricingStrategy": self.strategy,
            "baseRatePerDay": self.base_rate_per_day,
            "baseRatePerHour": self.base_rate_per_hour,
            "baseCost": self.base_cost,
            "rateBreakdown": self.rate_breakdown.to_dict() if self.rate_breakdown else None,
            "extras": list(self.extras),
            "totalExtrasCost": self.total_extras_cost,
            "deliveryFee": self.delivery_fee,
            "returnFee": self.return_fee,
            "insuranceFee": self.insurance_fee,
            "subTotal": self.subtotal,
            "discounts": [
                {
                    "discountType": d.kind,
                    "discountName": d.name,
                    "discountAmount": d.amount,
                    "discountPercentage": d.percentage,
                    "description": d.description,
                }
                for d in self.discounts
            ],
            "totalDiscountAmount": self.total_discount_amount,
            "loyaltyPointsToRedeem": self.loyalty_points_to_redeem,
            "loyaltyPointsDiscount": self.loyalty_points_discount,
            "totalCost": self.total_after_discounts,
            "taxPercentage": self.tax_percentage,
            "taxAmount": self.tax_amount,
            "finalAmount": self.final_amount,
            "loyaltyPointsToEarn": self.loyalty_points_to_earn,
            "currency": self.currency,
            "isAvailable": self.is_available,
            "calculatedAt": self.calculated_at.isoformat(),
        }


@dataclass(frozen=True)
class QuoteResult:
    """
    Outcome of a cost quote. Expected failures (bad input, unknown car, car
    already booked) are statuses here, not exceptions.
    """
    status: str
    message: str = ""
    breakdown: Optional[CostBreakdown] = None
    car_id: Optional[str] = None
    car_name: str = ""
    currency: str = ""
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == QuoteStatus.OK

    @property
    def is_available(self) -> bool:
        return self.status == QuoteStatus.OK

    def to_dict(self) -> dict:
        if self.breakdown is not None:
            return self.breakdown.to_dict()
        if self.status == QuoteStatus.UNAVAILABLE:
            return {
                "carId": self.car_id,
                "carName": self.car_name,
                "isAvailable": False,
                "reason": self.message,
                "finalAmount": ZERO,
                "currency": self.currency,
                **self.details,
            }
        return {"success": False, "message": self.message}
