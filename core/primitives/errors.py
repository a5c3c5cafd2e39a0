"""
GovServe Core Primitives - Errors
=================================
Input-shape errors raised by value objects.

These are raised BEFORE any state change. Domain rule violations
(promo rejected, invalid transition, overpayment) are not exceptions
here: they travel inside a rejected Outcome.
"""


class ValidationError(ValueError):
    """Base error for malformed input (bad shape, bad type, bad sign)."""
    pass


class NegativeAmountError(ValidationError):
    """A non-negative monetary amount would go below zero."""

    def __init__(self, amount: int, operation: str = ""):
        self.amount = amount
        self.operation = operation
        suffix = f" (during {operation})" if operation else ""
        super().__init__(
            f"Monetary amount cannot be negative, got {amount}{suffix}. "
            f"Use signed=True for discount deltas."
        )


class InvalidAmountError(ValidationError):
    """Amount has the wrong type or is out of the allowed range."""
    pass
