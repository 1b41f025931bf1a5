"""
Custom exception classes for the rental pricing engine.

These exceptions provide precise error types that the pricing service and
controllers can catch to return structured results instead of generic 500 errors.
"""


class InvalidRateInputError(ValueError):
    """Raised when a duration, rate or quantity given to the optimizer is not usable."""

    def __init__(self, message: str = "Error: invalid rate input") -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class InvalidDateRangeError(ValueError):
    """Raised when start is not before end or an invalid date is provided."""

    def __init__(self, message: str = "Error: invalid date range") -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class InvalidQuoteRequestError(ValueError):
    """Raised when a cost quote request carries bad ids, points or quantities."""

    def __init__(self, message: str = "Error: invalid quote request") -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class PricingInvariantError(RuntimeError):
    """Raised when a computed amount breaks a pricing invariant (an internal defect)."""

    def __init__(self, message: str = "Error: pricing invariant violated") -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message
