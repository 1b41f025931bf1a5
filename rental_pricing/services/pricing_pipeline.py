"""
Booking cost pipeline.

Stage order is fixed and each stage feeds the next:

    availability -> duration -> base cost -> extras -> fees -> subtotal
    -> discounts (long-term, promo code, loyalty points) -> total after discounts
    -> tax on the net amount -> final amount -> loyalty points to earn

Intermediate amounts keep full Decimal precision; rounding (half-up, 2 places)
happens once, when the CostBreakdown is built.
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Iterable, List, Optional, Tuple

from ..exceptions import (
    InvalidDateRangeError,
    InvalidQuoteRequestError,
    InvalidRateInputError,
    PricingInvariantError,
)
from ..models.config import PricingConfig
from ..models.pricing import (
    CostBreakdown,
    DiscountEntry,
    ExtraLineItem,
    LoyaltyRedemption,
    PeriodDecomposition,
    PromoDiscount,
    QuoteResult,
    RentalInterval,
)
from ..models.rate_card import Car, ExtraPrice
from ..utils.constants import (
    ALLOWED_STRATEGIES,
    DiscountKind,
    PricingStrategy,
    QuoteStatus,
    UNAVAILABLE_REASON,
)
from ..utils.dates import utc_now
from ..utils.money import ZERO, percent_of, round_money
from .availability import AvailabilityGate
from .rate_optimizer import RateOptimizer

logger = logging.getLogger(__name__)

PromoResolver = Callable[[str], Optional[PromoDiscount]]


class PricingPipeline:
    """
    Computes a full booking quote for one car. Holds only immutable
    configuration, so one instance can serve concurrent requests.
    """

    def __init__(
            self,
            config: PricingConfig,
            gate: AvailabilityGate,
            optimizer: Optional[RateOptimizer] = None,
            promo_resolver: Optional[PromoResolver] = None,
    ):
        self.config = config
        self.gate = gate
        self.optimizer = optimizer or RateOptimizer(max_days=config.max_rental_days)
        self.promo_resolver = promo_resolver

    # --------------- entry point ---------------
    def quote(
            self,
            car: Car,
            interval: RentalInterval,
            extras: Iterable[Tuple[ExtraPrice, int]] = (),
            pickup_branch_id=None,
            return_branch_id=None,
            promo_code: Optional[str] = None,
            points_to_redeem: Optional[int] = None,
            point_balance: Optional[int] = None,
            strategy: Optional[str] = None,
            exclude_booking_id=None,
            now=None,
    ) -> QuoteResult:
        extras = list(extras)
        strategy = str(strategy or self.config.default_strategy).strip().lower()
        try:
            self._validate(interval, extras, pickup_branch_id, return_branch_id, points_to_redeem, strategy)
        except (InvalidDateRangeError, InvalidQuoteRequestError, InvalidRateInputError) as e:
            logger.warning("Rejected quote for car %s: %s", car.car_id, e.message)
            return QuoteResult(status=QuoteStatus.INVALID, message=e.message, car_id=car.car_id)

        # 1) availability gates everything below
        if not self.gate.is_available(car.car_id, interval, exclude_booking_id):
            return QuoteResult(
                status=QuoteStatus.UNAVAILABLE,
                message=UNAVAILABLE_REASON,
                car_id=car.car_id,
                car_name=car.display_name,
                currency=self.config.currency,
                details={
                    "startDate": interval.start.isoformat(),
                    "endDate": interval.end.isoformat(),
                },
            )

        breakdown = self._price(
            car, interval, extras, pickup_branch_id, return_branch_id,
            promo_code, points_to_redeem, point_balance, strategy, now,
        )
        logger.info("Quoted car %s for %s days (%s): %s %s", car.car_id, breakdown.total_days,
                    strategy, breakdown.final_amount, breakdown.currency)
        return QuoteResult(
            status=QuoteStatus.OK,
            breakdown=breakdown,
            car_id=car.car_id,
            car_name=car.display_name,
            currency=self.config.currency,
        )

    # --------------- validation ---------------
    def _validate(self, interval, extras, pickup_branch_id, return_branch_id, points_to_redeem, strategy):
        if interval.total_days > self.config.max_rental_days:
            raise InvalidDateRangeError(f"Rental period cannot exceed {self.config.max_rental_days} days")
        if pickup_branch_id in (None, "") or return_branch_id in (None, ""):
            raise InvalidQuoteRequestError("Invalid branch ID(s)")
        if points_to_redeem is not None:
            if isinstance(points_to_redeem, bool) or not isinstance(points_to_redeem, int):
                raise InvalidQuoteRequestError("Loyalty points to redeem must be a whole number")
            if points_to_redeem < 0:
                raise InvalidQuoteRequestError("Loyalty points to redeem cannot be negative")
        if strategy not in ALLOWED_STRATEGIES:
            raise InvalidQuoteRequestError(f"Unknown pricing strategy: {strategy}")
        for extra, qty in extras:
            if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
                raise InvalidQuoteRequestError(f"Invalid quantity for extra {extra.extra_id}")
            if extra.daily_price is None or extra.daily_price < ZERO:
                raise InvalidQuoteRequestError(f"Invalid price for extra {extra.extra_id}")

    # --------------- stages 2..11 ---------------
    def _price(self, car, interval, extras, pickup_branch_id, return_branch_id,
               promo_code, points_to_redeem, point_balance, strategy, now) -> CostBreakdown:
        cfg = self.config

        # 2) duration
        total_days = interval.total_days

        # 3) base cost
        base_cost, rate_breakdown = self._base_cost(car, total_days, strategy)

        # 4) extras, each billed for the same days as the car
        lines = [
            ExtraLineItem(
                extra_id=extra.extra_id,
                name=extra.name,
                unit_daily_price=extra.daily_price,
                quantity=qty,
                total_days=total_days,
            )
            for extra, qty in extras
        ]
        extras_cost = sum((line.total_cost for line in lines), ZERO)

        # 5) fees
        delivery_fee = cfg.delivery_fee if str(pickup_branch_id) != str(return_branch_id) else ZERO
        insurance_fee = percent_of(base_cost, cfg.insurance_percentage)

        # 6) subtotal
        subtotal = base_cost + extras_cost + delivery_fee + insurance_fee

        # 7) discounts: long-term, promo, loyalty (in that order)
        discounts, points_applied, loyalty_discount = self._discounts(
            subtotal, total_days, promo_code, points_to_redeem, point_balance)
        total_discount = sum((d.amount for d in discounts), ZERO)

        # 8) net
        total_after = max(subtotal - total_discount, ZERO)

        # 9) tax on the net amount
        tax_amount = percent_of(total_after, cfg.tax_percentage)

        # 10) final
        final_amount = total_after + tax_amount
        if final_amount < ZERO:
            raise PricingInvariantError(f"Negative final amount {final_amount} for car {car.car_id}")

        # 11) accrual on what is actually charged
        final_surfaced = round_money(final_amount)
        points_to_earn = int((final_surfaced * cfg.loyalty_points_per_currency_unit)
                             .to_integral_value(rounding=ROUND_FLOOR))

        logger.debug(
            "car=%s days=%s base=%s extras=%s delivery=%s insurance=%s subtotal=%s "
            "discounts=%s net=%s tax=%s final=%s",
            car.car_id, total_days, base_cost, extras_cost, delivery_fee, insurance_fee,
            subtotal, total_discount, total_after, tax_amount, final_amount,
        )

        return CostBreakdown(
            car_id=car.car_id,
            car_name=car.display_name,
            start_date=interval.start,
            end_date=interval.end,
            total_days=total_days,
            total_hours=interval.total_hours,
            strategy=strategy,
            base_rate_per_day=round_money(car.rate_card.daily_rate),
            base_rate_per_hour=round_money(car.rate_card.daily_rate / 24),
            base_cost=round_money(base_cost),
            rate_breakdown=rate_breakdown,
            extras=[
                {
                    "extraId": line.extra_id,
                    "extraName": line.name,
                    "pricePerDay": round_money(line.unit_daily_price),
                    "pricePerHour": round_money(line.unit_daily_price / 24),
                    "quantity": line.quantity,
                    "totalCost": round_money(line.total_cost),
                    "pricingType": "PerDay",
                }
                for line in lines
            ],
            total_extras_cost=round_money(extras_cost),
            delivery_fee=round_money(delivery_fee),
            return_fee=round_money(ZERO),
            insurance_fee=round_money(insurance_fee),
            subtotal=round_money(subtotal),
            discounts=[
                DiscountEntry(
                    kind=d.kind,
                    name=d.name,
                    amount=round_money(d.amount),
                    percentage=d.percentage,
                    description=d.description,
                )
                for d in discounts
            ],
            total_discount_amount=round_money(total_discount),
            loyalty_points_to_redeem=points_applied,
            loyalty_points_discount=round_money(loyalty_discount),
            total_after_discounts=round_money(total_after),
            tax_percentage=cfg.tax_percentage,
            tax_amount=round_money(tax_amount),
            final_amount=final_surfaced,
            loyalty_points_to_earn=points_to_earn,
            currency=cfg.currency,
            calculated_at=now or utc_now(),
        )

    def _base_cost(self, car: Car, total_days: int, strategy: str) -> Tuple[Decimal, Optional[PeriodDecomposition]]:
        card = car.rate_card
        if strategy == PricingStrategy.OPTIMIZED:
            rate_quote = self.optimizer.optimize_card(total_days, card)
            return rate_quote.min_cost, rate_quote.decomposition
        return card.daily_rate * total_days, None

    def _discounts(self, subtotal: Decimal, total_days: int, promo_code, points_to_redeem,
                   point_balance) -> Tuple[List[DiscountEntry], int, Decimal]:
        cfg = self.config
        discounts: List[DiscountEntry] = []
        remaining = subtotal

        # a) long-duration: single highest tier met
        pct = cfg.long_term_percentage(total_days)
        if pct > ZERO:
            amount = min(percent_of(subtotal, pct), remaining)
            discounts.append(DiscountEntry(
                kind=DiscountKind.LONG_TERM,
                name=f"Long Term Rental Discount ({pct.normalize():f}%)",
                amount=amount,
                percentage=pct,
                description=f"Discount for {total_days} days rental",
            ))
            remaining -= amount

        # b) promo code: validated elsewhere, only slotted in here
        promo = self._resolve_promo(promo_code)
        if promo is not None:
            amount = min(max(promo.amount_for(subtotal), ZERO), remaining)
            if amount > ZERO:
                discounts.append(DiscountEntry(
                    kind=DiscountKind.PROMO_CODE,
                    name=f"Promo Code {promo.code}",
                    amount=amount,
                    percentage=promo.percentage,
                    description=promo.description or f"Promo code {promo.code}",
                ))
                remaining -= amount

        # c) loyalty points: capped on the pre-discount subtotal, clamped to what is left
        points_applied = 0
        loyalty_discount = ZERO
        if points_to_redeem and point_balance is not None:
            redemption = LoyaltyRedemption(
                points_requested=points_to_redeem,
                points_available=point_balance,
                point_value=cfg.loyalty_point_value,
                max_redemption_percentage=cfg.max_loyalty_redemption_percentage,
            )
            points_applied = redemption.points_applied(subtotal, remaining)
            loyalty_discount = redemption.discount_value(points_applied)
            if points_applied < points_to_redeem:
                logger.info("Loyalty redemption clamped from %s to %s points", points_to_redeem, points_applied)
            if points_applied > 0:
                discounts.append(DiscountEntry(
                    kind=DiscountKind.LOYALTY_POINTS,
                    name="Loyalty Points Redemption",
                    amount=loyalty_discount,
                    description=f"{points_applied} points redeemed",
                ))

        return discounts, points_applied, loyalty_discount

    def _resolve_promo(self, promo_code: Optional[str]) -> Optional[PromoDiscount]:
        code = (promo_code or "").strip()
        if not code or self.promo_resolver is None:
            return None
        promo = self.promo_resolver(code)
        if promo is None:
            logger.info("Promo code %r not recognised; no promo discount applied", code)
        return promo
