"""GovServe Orders Engine tests - PricingEngine and receipt lines."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from core.config.rules import PricingRules
from core.primitives.money import Money, MoneyDelta
from engines.orders.errors import InconsistentPaymentError, InvalidQuantityError
from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Fine,
    Order,
    PromoCode,
    PromoType,
    ServiceVariant,
)
from engines.orders.pricing import PricingEngine, receipt_lines

NOW = datetime(2026, 2, 21, 9, 0, 0, tzinfo=timezone.utc)


def make_order(**overrides):
    fields = dict(
        order_id="000001",
        variant=ServiceVariant("passport-renewal", Money(10000), eta_days=7),
        quantity=1,
        delivery_type=DeliveryType.OFFICE,
        customer=CustomerInfo(name="Mona Adel", phone="01000000000"),
        created_at=NOW,
    )
    fields.update(overrides)
    return Order(**fields)


def fixed_promo(value=1000, **overrides):
    fields = dict(
        promo_id="promo-1",
        code="SAVE10",
        promo_type=PromoType.FIXED,
        value=value,
        min_order_amount=Money(15000),
    )
    fields.update(overrides)
    return PromoCode(**fields)


class TestWorkedExample:
    def test_home_delivery_fine_and_fixed_promo(self):
        order = make_order(
            quantity=2,
            delivery_type=DeliveryType.HOME,
            delivery_fee=Money(5000),
            fines=(Fine("مهنة", Money(500)),),
            promo_code=fixed_promo(),
            discount_amount=Money(1000),
        )
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.subtotal == Money(20000)
        assert breakdown.fines_surcharge == Money(1500)
        assert breakdown.other_fees_total == Money(0)
        assert breakdown.delivery_fee_applied == Money(5000)
        assert breakdown.gross_total == Money(26500)
        assert breakdown.discount_total == Money(1000)
        assert breakdown.final_total == Money(25500)
        assert breakdown.remaining_amount == Money(25500)


class TestPricingSteps:
    def test_office_delivery_ignores_delivery_fee(self):
        order = make_order(delivery_type=DeliveryType.OFFICE, delivery_fee=Money(5000))
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.delivery_fee_applied == Money(0)
        assert breakdown.final_total == Money(10000)

    def test_lost_report_goes_to_other_fees_without_surcharge(self):
        order = make_order(
            other_fees=Money(700),
            fines=(
                Fine("محضر فقد", Money(10000), is_lost_report=True),
                Fine("انتهاء", Money(5000)),
            ),
        )
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.fines_surcharge == Money(6000)
        assert breakdown.other_fees_total == Money(10700)

    def test_multiple_lost_reports_are_summed(self):
        order = make_order(fines=(
            Fine("lost report A", Money(10000), is_lost_report=True),
            Fine("lost report B", Money(10000), is_lost_report=True),
        ))
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.other_fees_total == Money(20000)
        assert breakdown.fines_surcharge == Money(0)

    def test_surcharge_comes_from_rules(self):
        order = make_order(fines=(Fine("a", Money(100)), Fine("b", Money(100))))
        rules = PricingRules(fine_surcharge_minor=250)
        breakdown = PricingEngine(rules).compute_total(order).unwrap()
        assert breakdown.fines_surcharge == Money(700)

    def test_staff_and_promo_discounts_add_up(self):
        order = make_order(
            discount=Money(500),
            promo_code=fixed_promo(),
            discount_amount=Money(1000),
        )
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.discount_total == Money(1500)
        assert breakdown.final_total == Money(8500)

    def test_promo_discount_ignored_without_promo(self):
        order = make_order(discount_amount=Money(1000))
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.discount_total == Money(0)

    def test_final_total_clamped_at_zero(self):
        order = make_order(discount=Money(50000))
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.final_total == Money(0)
        assert breakdown.remaining_amount == Money(0)

    def test_total_identity(self):
        order = make_order(
            quantity=3,
            delivery_type=DeliveryType.HOME,
            delivery_fee=Money(2500),
            other_fees=Money(300),
            discount=Money(1200),
            fines=(Fine("a", Money(400)), Fine("lost", Money(900), is_lost_report=True)),
        )
        b = PricingEngine().compute_total(order).unwrap()
        expected = (
            b.subtotal.amount + b.fines_surcharge.amount + b.other_fees_total.amount
            + b.delivery_fee_applied.amount - b.discount_total.amount
        )
        assert b.final_total.amount == max(0, expected)

    def test_remaining_after_partial_payment(self):
        order = make_order(paid_amount=Money(4000))
        breakdown = PricingEngine().compute_total(order).unwrap()
        assert breakdown.paid_amount == Money(4000)
        assert breakdown.remaining_amount == Money(6000)


class TestPricingErrors:
    def test_quantity_below_one_raises(self):
        order = make_order(quantity=0)
        with pytest.raises(InvalidQuantityError):
            PricingEngine().compute_total(order)

    def test_overpaid_order_is_rejected(self):
        order = make_order(paid_amount=Money(10001))
        outcome = PricingEngine().compute_total(order)
        assert outcome.is_rejected
        assert isinstance(outcome.error, InconsistentPaymentError)
        assert outcome.reason.code == "INCONSISTENT_PAYMENT"
        assert outcome.error.details["final_total"] == 10000

    def test_overpayment_within_tolerance_is_accepted(self):
        order = make_order(paid_amount=Money(10050))
        outcome = PricingEngine(PricingRules(payment_tolerance_minor=100)).compute_total(order)
        assert outcome.is_accepted
        assert outcome.value.remaining_amount == Money(0)


class TestRendererContract:
    def test_to_dict_uses_camel_case_minor_units(self):
        order = make_order(delivery_type=DeliveryType.HOME, delivery_fee=Money(5000))
        data = PricingEngine().compute_total(order).unwrap().to_dict()
        assert data == {
            "subtotal": 10000,
            "finesSurcharge": 0,
            "otherFeesTotal": 0,
            "deliveryFeeApplied": 5000,
            "grossTotal": 15000,
            "discountTotal": 0,
            "finalTotal": 15000,
            "paidAmount": 0,
            "remainingAmount": 15000,
        }

    def test_receipt_lines_skip_zero_charges_and_sign_discount(self):
        order = make_order(discount=Money(2000), paid_amount=Money(1000))
        lines = receipt_lines(PricingEngine().compute_total(order).unwrap())
        keys = [line.key for line in lines]
        assert keys == [
            "subtotal", "discountTotal", "finalTotal", "paidAmount", "remainingAmount",
        ]
        discount = lines[1]
        assert isinstance(discount.amount, MoneyDelta)
        assert discount.to_dict() == {"key": "discountTotal", "amount": -2000, "display": "-20.00"}

    def test_pricing_is_deterministic(self):
        order = make_order(fines=(Fine("a", Money(400)),))
        engine = PricingEngine()
        assert engine.compute_total(order) == engine.compute_total(replace(order))
