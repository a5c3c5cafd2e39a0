"""
GovServe Orders Engine - Policies
=================================
Promo-code eligibility and payment reconciliation rules.

Each policy is a pure function returning a typed DomainRuleError
when the rule is violated, or None when it passes. Policies never
mutate their inputs; in particular promo validation does NOT touch
current_usage (usage is recorded once the paid order is persisted).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.commands.outcomes import Outcome
from core.primitives.money import Money
from engines.orders.errors import (
    InconsistentPaymentError,
    OverpaymentError,
    PromoCodeError,
    PromoErrorCode,
)
from engines.orders.models import PromoCode, PromoType, ValidPromo


# ══════════════════════════════════════════════════════════════
# PROMO CODE POLICIES
# ══════════════════════════════════════════════════════════════

def promo_currency_must_match_policy(
    promo: PromoCode, order_subtotal: Money,
) -> Optional[PromoCodeError]:
    promo_currency = promo.min_order_amount.currency
    if promo_currency != order_subtotal.currency:
        return PromoCodeError(
            PromoErrorCode.CURRENCY_MISMATCH,
            f"Promo code '{promo.code}' is priced in {promo_currency}, "
            f"the order in {order_subtotal.currency}.",
            policy_name="promo_currency_must_match_policy",
            promo_currency=promo_currency,
            order_currency=order_subtotal.currency,
        )
    return None


def promo_usage_must_not_be_exhausted_policy(promo: PromoCode) -> Optional[PromoCodeError]:
    if promo.is_exhausted:
        return PromoCodeError(
            PromoErrorCode.USAGE_EXCEEDED,
            f"Promo code '{promo.code}' has reached its usage limit.",
            policy_name="promo_usage_must_not_be_exhausted_policy",
            usage_limit=promo.usage_limit,
            current_usage=promo.current_usage,
        )
    return None


def promo_must_be_active_policy(promo: PromoCode) -> Optional[PromoCodeError]:
    if not promo.is_active:
        return PromoCodeError(
            PromoErrorCode.INACTIVE,
            f"Promo code '{promo.code}' is not active.",
            policy_name="promo_must_be_active_policy",
        )
    return None


def promo_must_be_within_validity_policy(
    promo: PromoCode, now: datetime,
) -> Optional[PromoCodeError]:
    window = promo.validity
    if window.contains(now):
        return None
    not_started = not window.has_started(now)
    return PromoCodeError(
        PromoErrorCode.EXPIRED,
        f"Promo code '{promo.code}' has not started yet." if not_started
        else f"Promo code '{promo.code}' has expired.",
        policy_name="promo_must_be_within_validity_policy",
        not_started=not_started,
        start_date=promo.start_date.isoformat() if promo.start_date else None,
        end_date=promo.end_date.isoformat() if promo.end_date else None,
    )


def promo_minimum_order_policy(
    promo: PromoCode, order_subtotal: Money,
) -> Optional[PromoCodeError]:
    if order_subtotal < promo.min_order_amount:
        return PromoCodeError(
            PromoErrorCode.BELOW_MINIMUM,
            f"Order subtotal must be at least {promo.min_order_amount.format()} "
            f"to use promo code '{promo.code}'.",
            policy_name="promo_minimum_order_policy",
            min_order_amount=promo.min_order_amount.amount,
            order_subtotal=order_subtotal.amount,
        )
    return None


def compute_promo_discount(promo: PromoCode, order_subtotal: Money) -> Money:
    """
    PERCENT: value% of the subtotal, clamped to max_discount when set.
    FIXED:   value, never more than the subtotal it applies to.
    """
    if promo.promo_type == PromoType.PERCENT:
        discount = order_subtotal.percent_of(promo.value)
        if promo.max_discount is not None:
            discount = discount.min(promo.max_discount)
        return discount.min(order_subtotal)
    return Money(promo.value, order_subtotal.currency).min(order_subtotal)


def validate_promo_code(
    promo: PromoCode, order_subtotal: Money, now: datetime,
) -> Outcome[ValidPromo]:
    """
    Validate a promo code against an order subtotal at `now`.

    Checks run in a fixed order and the first failure wins:
    usage limit, active flag, validity window, currency, minimum
    subtotal.
    An exhausted code reports USAGE_EXCEEDED whatever its dates
    or the order amount.
    """
    checks = (
        lambda: promo_usage_must_not_be_exhausted_policy(promo),
        lambda: promo_must_be_active_policy(promo),
        lambda: promo_must_be_within_validity_policy(promo, now),
        lambda: promo_currency_must_match_policy(promo, order_subtotal),
        lambda: promo_minimum_order_policy(promo, order_subtotal),
    )
    for check in checks:
        error = check()
        if error is not None:
            return Outcome.rejected(error)
    return Outcome.accepted(
        ValidPromo(promo=promo, discount_amount=compute_promo_discount(promo, order_subtotal))
    )


# ══════════════════════════════════════════════════════════════
# PAYMENT POLICIES
# ══════════════════════════════════════════════════════════════

def payment_must_not_exceed_remaining_policy(
    order_id: str, amount: Money, remaining: Money, tolerance: Money,
) -> Optional[OverpaymentError]:
    if amount > remaining.add(tolerance):
        return OverpaymentError(order_id, amount.amount, remaining.amount)
    return None


def paid_amount_must_not_exceed_total_policy(
    order_id: str, paid: Money, final_total: Money, tolerance: Money,
) -> Optional[InconsistentPaymentError]:
    if paid > final_total.add(tolerance):
        return InconsistentPaymentError(
            order_id, paid.amount, final_total.amount, tolerance.amount,
        )
    return None
