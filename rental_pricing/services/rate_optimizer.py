"""
Minimum-cost billing of a rental duration over day/week/month periods.

f(n) is the cheapest way to cover at least n days, f(n) = 0 for n <= 0:

    f(n) = min(daily + f(n - 1), weekly + f(n - 7), monthly + f(n - 30))

A period longer than what is left resolves to f(0), so overshoot (billing
2 months for 35 days when that is cheaper) is priced with no special case.
Greedy largest-period-first does not work here because tier prices are not
proportional to their length.
"""
import logging
import math
from decimal import Decimal
from functools import lru_cache
from typing import Optional, Tuple

from ..exceptions import InvalidRateInputError
from ..models.pricing import PeriodDecomposition, RateComparison, RateQuote
from ..models.rate_card import RateCard
from ..utils.constants import DAYS_IN_MONTH, DAYS_IN_WEEK

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 365

# (cost, periods, day-units, months, weeks); tuple order is the tie-break order
_State = Tuple[Decimal, int, int, int, int]


@lru_cache(maxsize=1024)
def _solve(total_days: int, daily: Decimal, weekly: Decimal, monthly: Decimal) -> _State:
    best = [(Decimal("0"), 0, 0, 0, 0)]  # best[n] for n = 0..total_days
    for n in range(1, total_days + 1):
        d = best[n - 1]
        w = best[max(0, n - DAYS_IN_WEEK)]
        m = best[max(0, n - DAYS_IN_MONTH)]
        best.append(min(
            (d[0] + daily, d[1] + 1, d[2] + 1, d[3], d[4]),
            (w[0] + weekly, w[1] + 1, w[2], w[3], w[4] + 1),
            (m[0] + monthly, m[1] + 1, m[2], m[3] + 1, m[4]),
        ))
    return best[total_days]


def _validate_days(total_days, max_days: Optional[int]) -> int:
    if isinstance(total_days, bool) or not isinstance(total_days, int):
        raise InvalidRateInputError("Total days must be a whole number")
    if total_days <= 0:
        raise InvalidRateInputError("Total days must be greater than 0")
    if max_days is not None and total_days > max_days:
        raise InvalidRateInputError(f"Total days cannot exceed {max_days}")
    return total_days


class RateOptimizer:
    """
    Stateless, safe to share between threads. Results are cached by
    (total_days, daily, weekly, monthly).
    """

    def __init__(self, max_days: Optional[int] = DEFAULT_MAX_DAYS):
        self.max_days = max_days

    def optimize(self, total_days: int, daily_rate, weekly_rate, monthly_rate) -> RateQuote:
        """
        Cheapest decomposition covering at least `total_days`.
        Ties go to the fewest periods, then the fewest day-units.
        """
        days = _validate_days(total_days, self.max_days)
        card = RateCard(daily_rate, weekly_rate, monthly_rate)
        return self._quote(days, card, quantity=1)

    def optimize_card(self, total_days: int, card: RateCard) -> RateQuote:
        days = _validate_days(total_days, self.max_days)
        return self._quote(days, card, quantity=1)

    def optimize_extra(self, total_days: int, quantity: int, daily_price, weekly_price,
                       monthly_price) -> RateQuote:
        """Same optimization for an extra; every tier is multiplied by `quantity`."""
        days = _validate_days(total_days, self.max_days)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRateInputError("Total days and quantity must be greater than 0")
        card = RateCard(daily_price, weekly_price, monthly_price)
        return self._quote(days, card, quantity=quantity)

    def simple_rate(self, total_days: int, daily_rate, weekly_rate, monthly_rate) -> Decimal:
        """
        Plain tier rule, kept for comparison: a month or more bills whole months,
        a week or more bills whole weeks, anything shorter bills days.
        """
        days = _validate_days(total_days, self.max_days)
        card = RateCard(daily_rate, weekly_rate, monthly_rate)
        if days >= DAYS_IN_MONTH:
            return card.monthly_rate * math.ceil(days / DAYS_IN_MONTH)
        if days >= DAYS_IN_WEEK:
            return card.weekly_rate * math.ceil(days / DAYS_IN_WEEK)
        return card.daily_rate * days

    def compare(self, total_days: int, daily_rate, weekly_rate, monthly_rate) -> RateComparison:
        standard = self.simple_rate(total_days, daily_rate, weekly_rate, monthly_rate)
        optimized = self.optimize(total_days, daily_rate, weekly_rate, monthly_rate)
        return RateComparison(
            standard_cost=standard,
            optimized_cost=optimized.min_cost,
            optimized=optimized,
        )

    @staticmethod
    def _quote(days: int, card: RateCard, quantity: int) -> RateQuote:
        # scaling every tier by the same positive quantity keeps the same cheapest mix
        _, _, day_units, months, weeks = _solve(days, card.daily_rate, card.weekly_rate, card.monthly_rate)
        billed = card.scaled(quantity)
        decomposition = PeriodDecomposition(
            months=months,
            weeks=weeks,
            days=day_units,
            monthly_cost=billed.monthly_rate * months,
            weekly_cost=billed.weekly_rate * weeks,
            daily_cost=billed.daily_rate * day_units,
        )
        logger.debug("Optimized %s days x%s -> %s (%s)", days, quantity,
                     decomposition.total_cost, decomposition.description)
        return RateQuote(total_days=days, min_cost=decomposition.total_cost, decomposition=decomposition)


_default = RateOptimizer()


def optimize_rate(total_days: int, daily_rate, weekly_rate, monthly_rate) -> RateQuote:
    """Module-level shortcut using the default optimizer."""
    return _default.optimize(total_days, daily_rate, weekly_rate, monthly_rate)
