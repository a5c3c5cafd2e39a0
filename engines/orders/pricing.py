"""
GovServe Orders Engine - Pricing
================================
Turns an order snapshot into a PriceBreakdown.

Algorithm (fixed order, each step feeding the next):
    1. subtotal           = variant.base_price × quantity
    2. fines_surcharge    = Σ non-lost-report fines + surcharge × their count
    3. other_fees_total   = other_fees + Σ lost-report fines
    4. delivery_applied   = delivery_fee if HOME else 0
    5. gross_total        = 1 + 2 + 3 + 4
    6. discount_total     = staff discount + promo discount (if applied)
    7. final_total        = max(0, gross_total - discount_total)
    8. remaining_amount   = max(0, final_total - paid_amount)

Pure and deterministic: no clock, no randomness, no I/O.
PriceBreakdown field names and units (integer minor units) are
read verbatim by the receipt and admin order renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from core.commands.outcomes import Outcome
from core.config.rules import PricingRules
from core.primitives.money import Money, MoneyDelta
from engines.orders.commands import check_quantity
from engines.orders.models import DeliveryType, Order
from engines.orders.policies import paid_amount_must_not_exceed_total_policy


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Money
    fines_surcharge: Money
    other_fees_total: Money
    delivery_fee_applied: Money
    gross_total: Money
    discount_total: Money
    final_total: Money
    paid_amount: Money
    remaining_amount: Money

    def to_dict(self) -> dict:
        """Renderer contract: camelCase keys, integer minor units."""
        return {
            "subtotal": self.subtotal.amount,
            "finesSurcharge": self.fines_surcharge.amount,
            "otherFeesTotal": self.other_fees_total.amount,
            "deliveryFeeApplied": self.delivery_fee_applied.amount,
            "grossTotal": self.gross_total.amount,
            "discountTotal": self.discount_total.amount,
            "finalTotal": self.final_total.amount,
            "paidAmount": self.paid_amount.amount,
            "remainingAmount": self.remaining_amount.amount,
        }


@dataclass(frozen=True)
class ReceiptLine:
    key: str
    amount: Union[Money, MoneyDelta]

    def to_dict(self) -> dict:
        return {"key": self.key, "amount": self.amount.amount, "display": self.amount.format()}


class PricingEngine:
    def __init__(self, rules: PricingRules | None = None):
        self._rules = rules or PricingRules()

    @property
    def rules(self) -> PricingRules:
        return self._rules

    def compute_total(self, order: Order) -> Outcome[PriceBreakdown]:
        """
        Price an order snapshot.

        Raises InvalidQuantityError for quantity < 1. Returns a
        rejected outcome (InconsistentPaymentError) when the paid
        amount exceeds the final total beyond the configured
        tolerance, instead of silently clamping.
        """
        check_quantity(order.quantity)
        currency = order.currency
        zero = Money.zero(currency)

        subtotal = order.variant.base_price.multiply(order.quantity)

        regular_fines = [fine for fine in order.fines if not fine.is_lost_report]
        lost_reports = [fine for fine in order.fines if fine.is_lost_report]

        fines_surcharge = Money.sum_of(
            (fine.amount for fine in regular_fines), currency,
        ).add(
            self._rules.fine_surcharge_in(currency).multiply(len(regular_fines))
        )

        other_fees_total = order.other_fees.add(
            Money.sum_of((fine.amount for fine in lost_reports), currency)
        )

        delivery_fee_applied = (
            order.delivery_fee if order.delivery_type == DeliveryType.HOME else zero
        )

        gross_total = (
            subtotal.add(fines_surcharge).add(other_fees_total).add(delivery_fee_applied)
        )

        promo_discount = order.discount_amount if order.promo_code is not None else zero
        discount_total = order.discount.add(promo_discount)

        final_total = gross_total.subtract_clamped(discount_total)

        tolerance = self._rules.payment_tolerance_in(currency)
        inconsistent = paid_amount_must_not_exceed_total_policy(
            order.order_id, order.paid_amount, final_total, tolerance,
        )
        if inconsistent is not None:
            return Outcome.rejected(inconsistent)

        remaining_amount = final_total.subtract_clamped(order.paid_amount)

        return Outcome.accepted(PriceBreakdown(
            subtotal=subtotal,
            fines_surcharge=fines_surcharge,
            other_fees_total=other_fees_total,
            delivery_fee_applied=delivery_fee_applied,
            gross_total=gross_total,
            discount_total=discount_total,
            final_total=final_total,
            paid_amount=order.paid_amount,
            remaining_amount=remaining_amount,
        ))


def receipt_lines(breakdown: PriceBreakdown) -> List[ReceiptLine]:
    """
    Ordered lines for the printed receipt. Zero-valued optional
    charges are skipped; the discount renders as a negative delta.
    """
    lines = [ReceiptLine("subtotal", breakdown.subtotal)]
    optional = (
        ("finesSurcharge", breakdown.fines_surcharge),
        ("otherFeesTotal", breakdown.other_fees_total),
        ("deliveryFeeApplied", breakdown.delivery_fee_applied),
    )
    lines.extend(ReceiptLine(key, amount) for key, amount in optional if not amount.is_zero())
    if not breakdown.discount_total.is_zero():
        lines.append(ReceiptLine("discountTotal", MoneyDelta.negative_of(breakdown.discount_total)))
    lines.append(ReceiptLine("finalTotal", breakdown.final_total))
    lines.append(ReceiptLine("paidAmount", breakdown.paid_amount))
    lines.append(ReceiptLine("remainingAmount", breakdown.remaining_amount))
    return lines
