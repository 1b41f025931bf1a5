# rental_pricing/utils/constants.py

"""
Global constants for billing periods, booking statuses and discount kinds.
These constants are imported by both models and services.
"""

# Billing period lengths in days
DAYS_IN_WEEK = 7
DAYS_IN_MONTH = 30

# Currency precision (2 decimals)
MONEY_PLACES = "0.01"


class BookingStatus:
    OPEN = "open"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELED = "canceled"
    CLOSED = "closed"


class PricingStrategy:
    FLAT = "flat"
    OPTIMIZED = "optimized"


class DiscountKind:
    LONG_TERM = "long_term"
    PROMO_CODE = "promo_code"
    LOYALTY_POINTS = "loyalty_points"


class QuoteStatus:
    OK = "ok"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


# --- Misc ---
BLOCKING_BOOKING_STATES = {BookingStatus.OPEN, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
ALLOWED_STRATEGIES = {PricingStrategy.FLAT, PricingStrategy.OPTIMIZED}
UNAVAILABLE_REASON = "Car is not available for the selected dates"
