"""
GovServe Orders Engine - Lifecycle Service
==========================================
Orchestrates pricing, promo validation and the state machine
against persisted orders. Used by the checkout, admin edit,
payment confirmation and housekeeping flows.

Every operation is all-or-nothing:
    validate input (raise) → decide (Outcome) → save → publish.
Nothing is saved or published for a rejected outcome.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from core.commands.outcomes import ConsistencyWarning, Outcome
from core.commands.rejection import ReasonCode
from core.config.rules import PricingRules
from core.primitives.money import Money
from core.time.clock import Clock, SystemClock
from core.time.temporal import is_expired
from engines.orders.commands import (
    ApplyPromoCodeRequest,
    ChangeStatusRequest,
    CreateOrderRequest,
    RecordPaymentRequest,
    UpdateChargesRequest,
    check_quantity,
)
from engines.orders.errors import (
    ConcurrentModificationError,
    InconsistentPaymentError,
    PromoCodeError,
    PromoErrorCode,
)
from engines.orders.events import (
    EventBusSink,
    EventSink,
    OrderCreated,
    PaymentRecorded,
    PromoApplied,
    PromoRemoved,
)
from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Fine,
    Order,
    OrderStatus,
    ServiceVariant,
)
from engines.orders.policies import (
    payment_must_not_exceed_remaining_policy,
    validate_promo_code,
)
from engines.orders.pricing import PriceBreakdown, PricingEngine
from engines.orders.repository import OrderRepository
from engines.orders.workflow import OrderStateMachine

logger = logging.getLogger("govserve.orders")

PROMO_USAGE_CONFLICT = ReasonCode.PROMO_USAGE_CONFLICT


class OrderLifecycleService:
    def __init__(
        self,
        *,
        repository: OrderRepository,
        event_sink: EventSink | None = None,
        clock: Clock | None = None,
        rules: PricingRules | None = None,
        state_machine: OrderStateMachine | None = None,
    ):
        self._repository = repository
        self._event_sink = event_sink or EventBusSink()
        self._clock = clock or SystemClock()
        self._rules = rules or PricingRules()
        self._pricing = PricingEngine(self._rules)
        self._state_machine = state_machine or OrderStateMachine()

    @property
    def pricing(self) -> PricingEngine:
        return self._pricing

    # ── helpers ──────────────────────────────────────────────

    def _publish(self, event) -> None:
        self._event_sink.publish(event)

    @staticmethod
    def _with_breakdown(order: Order, breakdown: PriceBreakdown) -> Order:
        return dataclasses.replace(
            order,
            total_amount=breakdown.final_total,
            remaining_amount=breakdown.remaining_amount,
        )

    def _reprice_after_edit(self, order: Order) -> Outcome[Order]:
        """
        Recompute totals after a staff or promo edit.

        If the edit leaves the order overpaid beyond tolerance the
        edit is still accepted: the order is flagged for review and
        a ConsistencyWarning rides along the outcome.
        """
        outcome = self._pricing.compute_total(order)
        if outcome.is_accepted:
            return Outcome.accepted(self._with_breakdown(order, outcome.value))

        error = outcome.error
        if not isinstance(error, InconsistentPaymentError):
            return Outcome.rejected(error)

        unpaid_view = dataclasses.replace(order, paid_amount=Money.zero(order.currency))
        breakdown = self._pricing.compute_total(unpaid_view).unwrap()
        flagged = dataclasses.replace(
            order,
            total_amount=breakdown.final_total,
            remaining_amount=Money.zero(order.currency),
            requires_review=True,
            review_notes=order.review_notes + (error.message,),
        )
        warning = ConsistencyWarning(
            code=ReasonCode.INCONSISTENT_PAYMENT,
            message=error.message,
            details=dict(error.details),
        )
        logger.warning(
            f"Order {order.order_id} flagged for review: paid "
            f"{order.paid_amount.amount} > total {breakdown.final_total.amount}"
        )
        return Outcome.accepted(flagged, (warning,))

    # ── queries ──────────────────────────────────────────────

    def get_order(self, order_id: str) -> Order:
        return self._repository.load_order(order_id)

    def breakdown(self, order: Order) -> Outcome[PriceBreakdown]:
        return self._pricing.compute_total(order)

    # ── checkout ─────────────────────────────────────────────

    def create_order(
        self,
        variant: ServiceVariant,
        quantity: int,
        delivery_type: DeliveryType,
        customer_info: CustomerInfo,
        *,
        delivery_fee: Optional[Money] = None,
        fines: Iterable[Fine] = (),
        other_fees: Optional[Money] = None,
        discount: Optional[Money] = None,
    ) -> Order:
        request = CreateOrderRequest(
            variant=variant,
            quantity=quantity,
            delivery_type=delivery_type,
            customer=customer_info,
            delivery_fee=delivery_fee,
            fines=tuple(fines),
            other_fees=other_fees,
            discount=discount,
        )
        now = self._clock.now_utc()
        order = Order(
            order_id=self._repository.next_order_id(),
            variant=request.variant,
            quantity=request.quantity,
            delivery_type=request.delivery_type,
            customer=request.customer,
            created_at=now,
            updated_at=now,
            delivery_fee=request.delivery_fee,
            fines=request.fines,
            other_fees=request.other_fees,
            discount=request.discount,
            discount_amount=Money.zero(request.variant.base_price.currency),
            paid_amount=Money.zero(request.variant.base_price.currency),
            status=OrderStatus.PENDING,
        )
        # Nothing is paid yet, so pricing cannot be inconsistent here.
        breakdown = self._pricing.compute_total(order).unwrap()
        saved = self._repository.save_order(self._with_breakdown(order, breakdown))

        logger.info(
            f"Order created: {saved.order_id} (variant: {variant.variant_id}, "
            f"total: {breakdown.final_total.amount})"
        )
        self._publish(OrderCreated(
            order_id=saved.order_id, final_total=breakdown.final_total.amount, at=now,
        ))
        return saved

    # ── promo codes ──────────────────────────────────────────

    def apply_promo_code(self, order: Order, code: str, now: datetime) -> Outcome[Order]:
        request = ApplyPromoCodeRequest(code=code)
        check_quantity(order.quantity)

        if order.has_promo:
            return Outcome.rejected(PromoCodeError(
                PromoErrorCode.ALREADY_APPLIED,
                f"Order '{order.order_id}' already uses promo code "
                f"'{order.promo_code.code}'. Remove it first.",
                policy_name="one_promo_per_order_policy",
            ))

        promo = self._repository.load_promo_code(request.code)
        if promo is None:
            return Outcome.rejected(PromoCodeError(
                PromoErrorCode.NOT_FOUND,
                f"Promo code '{request.code}' does not exist.",
                policy_name="promo_must_exist_policy",
            ))

        subtotal = order.variant.base_price.multiply(order.quantity)
        validation = validate_promo_code(promo, subtotal, now)
        if validation.is_rejected:
            logger.info(
                f"Promo {request.code} rejected for order {order.order_id}: "
                f"{validation.error.code}"
            )
            return Outcome.rejected(validation.error)

        valid = validation.value
        updated = dataclasses.replace(
            order,
            promo_code=valid.promo,
            discount_amount=valid.discount_amount,
            updated_at=now,
        )
        repriced = self._reprice_after_edit(updated)
        if repriced.is_rejected:
            return repriced
        saved = self._repository.save_order(repriced.value)

        logger.info(
            f"Promo {promo.code} applied to order {saved.order_id} "
            f"(discount: {valid.discount_amount.amount})"
        )
        self._publish(PromoApplied(
            order_id=saved.order_id,
            code=promo.code,
            discount_amount=valid.discount_amount.amount,
            at=now,
        ))
        return Outcome.accepted(saved, repriced.warnings)

    def remove_promo_code(self, order: Order) -> Order:
        """
        Clear the promo and recompute. Usage already recorded for the
        promo is never given back, and is not taken again if the same
        promo is re-applied later.
        """
        if not order.has_promo:
            return order

        now = self._clock.now_utc()
        code = order.promo_code.code
        updated = dataclasses.replace(
            order,
            promo_code=None,
            discount_amount=Money.zero(order.currency),
            updated_at=now,
        )
        # Removing a discount only raises the total; the edit cannot be rejected.
        repriced = self._reprice_after_edit(updated).unwrap()
        saved = self._repository.save_order(repriced)

        logger.info(f"Promo {code} removed from order {saved.order_id}")
        self._publish(PromoRemoved(order_id=saved.order_id, code=code, at=now))
        return saved

    def _record_promo_usage(self, order: Order) -> bool:
        """
        Increment promo usage once, compare-and-swap style.

        Re-reads the promo before each attempt; gives up when the
        code disappeared, is exhausted, or the retries run out.
        """
        code = order.promo_code.code
        for attempt in range(self._rules.promo_usage_retries + 1):
            fresh = self._repository.get_promo_by_id(order.promo_code.promo_id)
            if fresh is None or fresh.is_exhausted:
                return False
            if self._repository.record_promo_usage(fresh.promo_id, fresh.current_usage):
                logger.info(
                    f"Promo {code} usage recorded for order {order.order_id} "
                    f"({fresh.current_usage} → {fresh.current_usage + 1})"
                )
                return True
            logger.debug(f"Promo {code} usage CAS conflict (attempt {attempt + 1})")
        return False

    # ── payments ─────────────────────────────────────────────

    def record_payment(self, order: Order, amount: Money) -> Outcome[Order]:
        request = RecordPaymentRequest(amount=amount, currency=order.currency)

        current = self._pricing.compute_total(order)
        if current.is_rejected:
            return Outcome.rejected(current.error)

        rejection = payment_must_not_exceed_remaining_policy(
            order.order_id,
            request.amount,
            current.value.remaining_amount,
            self._rules.payment_tolerance_in(order.currency),
        )
        if rejection is not None:
            return Outcome.rejected(rejection)

        now = self._clock.now_utc()
        paid = dataclasses.replace(
            order, paid_amount=order.paid_amount.add(request.amount), updated_at=now,
        )
        breakdown = self._pricing.compute_total(paid)
        if breakdown.is_rejected:
            return Outcome.rejected(breakdown.error)
        paid = self._with_breakdown(paid, breakdown.value)

        needs_usage = paid.has_promo and not paid.promo_usage_recorded
        if needs_usage:
            paid = dataclasses.replace(
                paid,
                recorded_promo_ids=paid.recorded_promo_ids + (paid.promo_code.promo_id,),
            )
        saved = self._repository.save_order(paid)

        warnings: Tuple[ConsistencyWarning, ...] = ()
        if needs_usage and not self._record_promo_usage(saved):
            message = (
                f"Promo code '{saved.promo_code.code}' usage could not be recorded "
                f"for order '{saved.order_id}'; the usage limit may be oversold."
            )
            saved = self._repository.save_order(dataclasses.replace(
                saved,
                requires_review=True,
                review_notes=saved.review_notes + (message,),
            ))
            warnings = (ConsistencyWarning(
                code=PROMO_USAGE_CONFLICT,
                message=message,
                details={"promo_id": saved.promo_code.promo_id, "order_id": saved.order_id},
            ),)
            logger.warning(message)

        balance = (
            "fully paid" if saved.is_fully_paid
            else f"remaining: {saved.remaining_amount.amount}"
        )
        logger.info(
            f"Payment recorded: order {saved.order_id} +{request.amount.amount} ({balance})"
        )
        self._publish(PaymentRecorded(
            order_id=saved.order_id,
            amount=request.amount.amount,
            remaining=saved.remaining_amount.amount,
            at=now,
        ))
        return Outcome.accepted(saved, warnings)

    # ── staff edits ──────────────────────────────────────────

    def update_charges(
        self,
        order: Order,
        *,
        fines: Optional[Iterable[Fine]] = None,
        other_fees: Optional[Money] = None,
        discount: Optional[Money] = None,
        delivery_type: Optional[DeliveryType] = None,
        delivery_fee: Optional[Money] = None,
    ) -> Outcome[Order]:
        request = UpdateChargesRequest(
            currency=order.currency,
            fines=tuple(fines) if fines is not None else None,
            other_fees=other_fees,
            discount=discount,
            delivery_type=delivery_type,
            delivery_fee=delivery_fee,
        )
        if request.is_empty:
            return Outcome.accepted(order)

        changes = {
            name: getattr(request, name)
            for name in ("fines", "other_fees", "discount", "delivery_type", "delivery_fee")
            if getattr(request, name) is not None
        }
        updated = dataclasses.replace(order, updated_at=self._clock.now_utc(), **changes)
        repriced = self._reprice_after_edit(updated)
        if repriced.is_rejected:
            return repriced
        saved = self._repository.save_order(repriced.value)

        logger.info(
            f"Charges updated on order {saved.order_id} ({', '.join(sorted(changes))}); "
            f"total: {saved.total_amount.amount}"
        )
        return Outcome.accepted(saved, repriced.warnings)

    # ── status ───────────────────────────────────────────────

    def change_status(
        self, order: Order, target: OrderStatus, actor_id: str | None = None,
    ) -> Outcome[Order]:
        request = ChangeStatusRequest(target=target)
        return self._transition(order, request.target, self._clock.now_utc(), actor_id)

    def _transition(
        self, order: Order, target: OrderStatus, at: datetime, actor_id: str | None,
    ) -> Outcome[Order]:
        outcome = self._state_machine.transition(order, target, at, actor_id=actor_id)
        if outcome.is_rejected:
            logger.info(
                f"Status change rejected for order {order.order_id}: {outcome.error.message}"
            )
            return Outcome.rejected(outcome.error)

        saved = self._repository.save_order(outcome.value.order)
        logger.info(
            f"Order {saved.order_id} status: {order.status.value} → {saved.status.value}"
        )
        self._publish(outcome.value.event)
        return Outcome.accepted(saved)

    def change_status_bulk(
        self, order_ids: Iterable[str], target: OrderStatus, actor_id: str | None = None,
    ) -> Dict[str, Outcome[Order]]:
        """
        Move several orders to the same status.

        All orders are loaded before any change, so an unknown id
        fails the whole batch. Each order then gets its own outcome.
        """
        request = ChangeStatusRequest(target=target)
        orders = [self._repository.load_order(order_id) for order_id in dict.fromkeys(order_ids)]
        now = self._clock.now_utc()
        results = {
            order.order_id: self._transition(order, request.target, now, actor_id)
            for order in orders
        }
        accepted = sum(1 for outcome in results.values() if outcome.is_accepted)
        logger.info(
            f"Bulk status change to {request.target.value}: "
            f"{accepted}/{len(results)} accepted"
        )
        return results

    # ── housekeeping ─────────────────────────────────────────

    def cancel_unpaid_orders(
        self, now: datetime, timeout: Optional[timedelta] = None,
    ) -> List[Order]:
        """
        Cancel PENDING orders with nothing paid that were created more
        than `timeout` (default: the configured payment timeout) ago.
        """
        timeout = timeout if timeout is not None else self._rules.payment_timeout
        cutoff = now - timeout
        cancelled: List[Order] = []

        for order in self._repository.list_orders(
            status=OrderStatus.PENDING, created_before=cutoff,
        ):
            if not order.paid_amount.is_zero() or not is_expired(order.created_at, timeout, now):
                continue
            try:
                outcome = self._transition(order, OrderStatus.CANCELLED, now, actor_id=None)
            except ConcurrentModificationError:
                logger.warning(
                    f"Order {order.order_id} changed during auto-cancel; left as is"
                )
                continue
            if outcome.is_accepted:
                cancelled.append(outcome.value)

        logger.info(
            f"Auto-cancel: {len(cancelled)} unpaid order(s) older than "
            f"{int(timeout.total_seconds() // 60)} minutes cancelled"
        )
        return cancelled
