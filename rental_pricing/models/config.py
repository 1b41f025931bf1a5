from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Mapping, Tuple

from ..utils.constants import ALLOWED_STRATEGIES, PricingStrategy
from ..utils.money import ZERO, HUNDRED, to_decimal

CONFIG_PREFIX = "PRICING_"

# (minimum days, discount percentage), highest threshold first
DEFAULT_LONG_TERM_TIERS: Tuple[Tuple[int, Decimal], ...] = (
    (30, Decimal("15")),
    (7, Decimal("10")),
)


@dataclass(frozen=True)
class PricingConfig:
    """
    Business constants for one region/policy. Percentages are whole percents
    (15 means 15%). Passed into the pipeline, never read from module globals.
    """
    tax_percentage: Decimal = Decimal("15")
    insurance_percentage: Decimal = Decimal("5")
    delivery_fee: Decimal = Decimal("50")
    long_term_tiers: Tuple[Tuple[int, Decimal], ...] = field(default=DEFAULT_LONG_TERM_TIERS)
    loyalty_point_value: Decimal = Decimal("0.1")
    max_loyalty_redemption_percentage: Decimal = Decimal("50")
    loyalty_points_per_currency_unit: Decimal = Decimal("1")
    currency: str = "SAR"
    default_strategy: str = PricingStrategy.FLAT
    max_rental_days: int = 365

    def __post_init__(self):
        for name in ("tax_percentage", "insurance_percentage", "delivery_fee",
                     "loyalty_point_value", "max_loyalty_redemption_percentage",
                     "loyalty_points_per_currency_unit"):
            value = to_decimal(getattr(self, name))
            if value is None or value < ZERO:
                raise ValueError(f"{name} must be a non-negative number")
            object.__setattr__(self, name, value)

        if self.loyalty_point_value <= ZERO:
            raise ValueError("loyalty_point_value must be positive")
        if self.max_loyalty_redemption_percentage > HUNDRED:
            raise ValueError("max_loyalty_redemption_percentage cannot exceed 100")

        tiers = []
        for min_days, pct in self.long_term_tiers:
            pct_dec = to_decimal(pct)
            if int(min_days) < 1 or pct_dec is None or not (ZERO <= pct_dec <= HUNDRED):
                raise ValueError(f"Invalid long-term tier: ({min_days}, {pct})")
            tiers.append((int(min_days), pct_dec))
        tiers.sort(key=lambda t: t[0], reverse=True)
        object.__setattr__(self, "long_term_tiers", tuple(tiers))

        if self.default_strategy not in ALLOWED_STRATEGIES:
            raise ValueError(f"Unknown pricing strategy: {self.default_strategy!r}")
        if int(self.max_rental_days) < 1:
            raise ValueError("max_rental_days must be at least 1")
        object.__setattr__(self, "max_rental_days", int(self.max_rental_days))

    def long_term_percentage(self, total_days: int) -> Decimal:
        """Percentage of the single highest tier whose threshold `total_days` meets, else 0."""
        for min_days, pct in self.long_term_tiers:
            if total_days >= min_days:
                return pct
        return ZERO

    def with_overrides(self, **changes) -> "PricingConfig":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "PricingConfig":
        """
        Build from a Flask-style config mapping, e.g. PRICING_TAX_PERCENTAGE=15.
        Missing keys keep their defaults. Tiers may be given as a dict
        {min_days: percentage} or a list of pairs.
        """
        kwargs = {}
        for name in cls.__dataclass_fields__:
            key = CONFIG_PREFIX + name.upper()
            if key in mapping and mapping[key] is not None:
                kwargs[name] = mapping[key]

        tiers = kwargs.get("long_term_tiers")
        if isinstance(tiers, Mapping):
            kwargs["long_term_tiers"] = tuple((int(k), v) for k, v in tiers.items())
        elif tiers is not None:
            kwargs["long_term_tiers"] = tuple((int(k), v) for k, v in tiers)
        if "default_strategy" in kwargs:
            kwargs["default_strategy"] = str(kwargs["default_strategy"]).strip().lower()
        return cls(**kwargs)
