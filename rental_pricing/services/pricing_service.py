"""Pricing operations exposed to the HTTP layer: rate optimization and booking cost quotes."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Optional

from rental_pricing.exceptions import InvalidDateRangeError, InvalidQuoteRequestError, InvalidRateInputError
from rental_pricing.models.config import PricingConfig
from rental_pricing.models.pricing import QuoteResult, RentalInterval
from rental_pricing.services.availability import AvailabilityGate
from rental_pricing.services.common import (
    _store,
    car_from_dict,
    extra_from_dict,
    promo_from_dict,
    to_int_safe,
)
from rental_pricing.services.pricing_pipeline import PricingPipeline
from rental_pricing.services.rate_optimizer import RateOptimizer
from rental_pricing.utils.constants import QuoteStatus
from rental_pricing.utils.dates import parse_instant, utc_now

logger = logging.getLogger(__name__)


def parse_extra_quantities(extras: Optional[Iterable]) -> Counter:
    """
    Turn a request's extras into {extra_id: quantity}.
    Accepts plain ids (repeating an id adds one) or {"id"/"extraId", "quantity"} dicts.
    """
    if isinstance(extras, (str, bytes, dict)):
        raise InvalidQuoteRequestError("Extras must be a list")
    quantities: Counter = Counter()
    for item in extras or ():
        if isinstance(item, dict):
            eid = item.get("extraId", item.get("id"))
            qty = to_int_safe(item.get("quantity", 1))
        else:
            eid, qty = item, 1
        if eid is None or str(eid).strip() == "":
            raise InvalidQuoteRequestError("Invalid extra ID")
        if qty is None or qty < 1:
            raise InvalidQuoteRequestError(f"Invalid quantity for extra {eid}")
        quantities[str(eid).strip()] += qty
    return quantities


class PricingService:
    """
    Wires the pricing core to its collaborators (car catalogue, bookings,
    extras, loyalty balances, promo codes). Collaborators default to the
    shared Store; tests inject their own.
    """

    def __init__(self, config: Optional[PricingConfig] = None, store: Any = None):
        self.config = config or PricingConfig()
        self.store = store
        self.optimizer = RateOptimizer(max_days=self.config.max_rental_days)

    def _get_store(self):
        """Prefer injected store (for tests). Otherwise the shared singleton."""
        if self.store is not None:
            return self.store
        return _store()

    def pipeline(self) -> PricingPipeline:
        st = self._get_store()
        return PricingPipeline(
            config=self.config,
            gate=AvailabilityGate(st),
            optimizer=self.optimizer,
            promo_resolver=lambda code: promo_from_dict(st.get_promo(code)),
        )

    # --------------- Rate optimization ---------------
    def optimize_rate(self, total_days, daily_rate, weekly_rate, monthly_rate):
        return self.optimizer.optimize(total_days, daily_rate, weekly_rate, monthly_rate)

    def optimize_extra_rate(self, total_days, quantity, daily_price, weekly_price, monthly_price):
        return self.optimizer.optimize_extra(total_days, quantity, daily_price, weekly_price, monthly_price)

    def compare_rates(self, total_days, daily_rate, weekly_rate, monthly_rate):
        return self.optimizer.compare(total_days, daily_rate, weekly_rate, monthly_rate)

    def simple_rate(self, total_days, daily_rate, weekly_rate, monthly_rate):
        return self.optimizer.simple_rate(total_days, daily_rate, weekly_rate, monthly_rate)

    # --------------- Booking cost ---------------
    def quote_booking_cost(
            self,
            car_id,
            start_date,
            end_date,
            pickup_branch_id,
            return_branch_id,
            extra_ids: Optional[Iterable] = None,
            promo_code: Optional[str] = None,
            loyalty_points_to_redeem=None,
            user_id: Optional[str] = None,
            strategy: Optional[str] = None,
            exclude_booking_id=None,
            now=None,
    ) -> QuoteResult:
        """
        Full cost quote for booking `car_id` over [start_date, end_date).
        Invalid input, unknown car and unavailable car come back as statuses,
        never as a zero-cost breakdown.
        """
        now = now or utc_now()
        try:
            interval = RentalInterval(parse_instant(start_date), parse_instant(end_date))
            if interval.start.date() < now.date():
                raise InvalidDateRangeError("Start date cannot be in the past")
            points = None
            if loyalty_points_to_redeem not in (None, ""):
                points = to_int_safe(loyalty_points_to_redeem)
                if points is None:
                    raise InvalidQuoteRequestError("Loyalty points to redeem must be a whole number")
                if points < 0:
                    raise InvalidQuoteRequestError("Loyalty points to redeem cannot be negative")
            quantities = parse_extra_quantities(extra_ids)
        except (InvalidDateRangeError, InvalidQuoteRequestError) as e:
            logger.warning("Rejected quote request for car %s: %s", car_id, e.message)
            return QuoteResult(status=QuoteStatus.INVALID, message=e.message, car_id=str(car_id))

        st = self._get_store()
        try:
            car = car_from_dict(st.get_car(car_id))
        except InvalidRateInputError as e:
            logger.warning("Car %s has an unusable rate card: %s", car_id, e.message)
            return QuoteResult(status=QuoteStatus.INVALID, message=e.message, car_id=str(car_id))
        if car is None:
            return QuoteResult(status=QuoteStatus.NOT_FOUND, message="Car not found", car_id=str(car_id))

        extras = []
        if quantities:
            found = {e["extra_id"]: extra_from_dict(e) for e in st.get_extras(list(quantities))}
            missing = [eid for eid in quantities if eid not in found]
            if missing:
                logger.info("Ignoring unknown or inactive extras: %s", ", ".join(missing))
            extras = [(found[eid], qty) for eid, qty in quantities.items() if eid in found]

        balance = None
        if points and user_id:
            balance = st.loyalty_balance(user_id)

        return self.pipeline().quote(
            car=car,
            interval=interval,
            extras=extras,
            pickup_branch_id=pickup_branch_id,
            return_branch_id=return_branch_id,
            promo_code=promo_code,
            points_to_redeem=points,
            point_balance=balance,
            strategy=strategy,
            exclude_booking_id=exclude_booking_id,
            now=now,
        )
