"""
GovServe Orders Engine - Errors
===============================
Two families, handled differently:

ValidationError subclasses are RAISED: the input has the wrong
shape and nothing was touched.

DomainRuleError subclasses are RETURNED inside a rejected Outcome:
the input is well-formed but a business rule says no. The UI layer
renders a specific message from `code`.

Repository errors (not found, concurrent modification) are raised
by the data-access collaborator and propagate unchanged.
"""

from __future__ import annotations

from enum import Enum

from core.commands.rejection import DomainRuleError, ReasonCode
from core.primitives.errors import InvalidAmountError, NegativeAmountError, ValidationError


# ══════════════════════════════════════════════════════════════
# VALIDATION (raised)
# ══════════════════════════════════════════════════════════════

class InvalidQuantityError(ValidationError):
    """Order quantity must be an integer >= 1."""

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"quantity must be an integer >= 1, got {quantity!r}.")


# ══════════════════════════════════════════════════════════════
# DOMAIN RULES (returned)
# ══════════════════════════════════════════════════════════════

class PromoErrorCode(Enum):
    EXPIRED = ReasonCode.PROMO_EXPIRED
    INACTIVE = ReasonCode.PROMO_INACTIVE
    USAGE_EXCEEDED = ReasonCode.PROMO_USAGE_EXCEEDED
    BELOW_MINIMUM = ReasonCode.PROMO_BELOW_MINIMUM
    NOT_FOUND = ReasonCode.PROMO_NOT_FOUND
    ALREADY_APPLIED = ReasonCode.PROMO_ALREADY_APPLIED
    CURRENCY_MISMATCH = ReasonCode.PROMO_CURRENCY_MISMATCH


class PromoCodeError(DomainRuleError):
    """A promo code cannot be applied to this order."""

    def __init__(self, error_code: PromoErrorCode, message: str, *, policy_name: str, **details):
        self.error_code = error_code
        self.code = error_code.value
        super().__init__(message, policy_name=policy_name, **details)


class InvalidTransitionError(DomainRuleError):
    """The requested status edge is not in the transition table."""

    code = ReasonCode.INVALID_TRANSITION

    def __init__(self, from_status: str, to_status: str, allowed=()):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition: {from_status} → {to_status}. "
            f"Allowed: {sorted(allowed)}.",
            policy_name="order_status_transition_policy",
            from_status=from_status,
            to_status=to_status,
            allowed=sorted(allowed),
        )


class OverpaymentError(DomainRuleError):
    """A payment would push the paid amount past the order total."""

    code = ReasonCode.OVERPAYMENT

    def __init__(self, order_id: str, amount: int, remaining: int):
        self.order_id = order_id
        self.amount = amount
        self.remaining = remaining
        super().__init__(
            f"Payment of {amount} exceeds remaining amount {remaining} "
            f"on order '{order_id}'.",
            policy_name="payment_must_not_exceed_remaining_policy",
            order_id=order_id,
            amount=amount,
            remaining=remaining,
        )


class InconsistentPaymentError(DomainRuleError):
    """Paid amount exceeds the computed total beyond tolerance."""

    code = ReasonCode.INCONSISTENT_PAYMENT

    def __init__(self, order_id: str, paid: int, final_total: int, tolerance: int):
        self.order_id = order_id
        self.paid = paid
        self.final_total = final_total
        self.tolerance = tolerance
        super().__init__(
            f"Order '{order_id}' has paid {paid} against a total of "
            f"{final_total} (tolerance {tolerance}). Manual reconciliation required.",
            policy_name="paid_amount_must_not_exceed_total_policy",
            order_id=order_id,
            paid=paid,
            final_total=final_total,
            tolerance=tolerance,
        )


# ══════════════════════════════════════════════════════════════
# REPOSITORY (raised by the data-access collaborator)
# ══════════════════════════════════════════════════════════════

class OrderRepositoryError(Exception):
    """Base error for order persistence."""
    pass


class OrderNotFoundError(OrderRepositoryError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order '{order_id}' not found.")


class ConcurrentModificationError(OrderRepositoryError):
    """Optimistic version check failed: someone saved the order first."""

    def __init__(self, order_id: str, expected_version: int):
        self.order_id = order_id
        self.expected_version = expected_version
        super().__init__(
            f"Order '{order_id}' was modified concurrently "
            f"(expected version {expected_version})."
        )


__all__ = [
    "ValidationError",
    "InvalidAmountError",
    "NegativeAmountError",
    "InvalidQuantityError",
    "PromoErrorCode",
    "PromoCodeError",
    "InvalidTransitionError",
    "OverpaymentError",
    "InconsistentPaymentError",
    "OrderRepositoryError",
    "OrderNotFoundError",
    "ConcurrentModificationError",
]
