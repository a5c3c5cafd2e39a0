"""
GovServe Django ORM Adapter - Order Repository
==============================================
OrderRepository over the Django ORM.

Concurrency guards are conditional UPDATEs:
    save_order          UPDATE ... WHERE order_id = ? AND version = ?
    record_promo_usage  UPDATE ... WHERE promo_id = ? AND current_usage = ?
A zero row count means another writer got there first.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Q

from adapters.django_orm.models import OrderRecord, OrderSequence, PromoCodeRecord
from core.config.rules import PricingRules
from core.primitives.money import Money
from engines.orders.errors import ConcurrentModificationError, OrderNotFoundError
from engines.orders.fines import decode_fines, encode_fines
from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Order,
    OrderStatus,
    PromoCode,
    PromoType,
    ServiceVariant,
)
from engines.orders.repository import format_order_number

logger = logging.getLogger("govserve.adapters")

ORDER_SEQUENCE_NAME = "orders"


# ══════════════════════════════════════════════════════════════
# ROW MAPPING
# ══════════════════════════════════════════════════════════════

def promo_from_record(record: PromoCodeRecord) -> PromoCode:
    currency = record.currency
    return PromoCode(
        promo_id=record.promo_id,
        code=record.code,
        promo_type=PromoType(record.promo_type),
        value=record.value,
        min_order_amount=Money(record.min_order_amount, currency),
        max_discount=(
            Money(record.max_discount, currency) if record.max_discount is not None else None
        ),
        start_date=record.start_date,
        end_date=record.end_date,
        usage_limit=record.usage_limit,
        current_usage=record.current_usage,
        is_active=record.is_active,
    )


def promo_to_fields(promo: PromoCode) -> dict:
    return {
        "code": promo.code,
        "promo_type": promo.promo_type.value,
        "value": promo.value,
        "currency": promo.min_order_amount.currency,
        "min_order_amount": promo.min_order_amount.amount,
        "max_discount": promo.max_discount.amount if promo.max_discount is not None else None,
        "start_date": promo.start_date,
        "end_date": promo.end_date,
        "usage_limit": promo.usage_limit,
        "current_usage": promo.current_usage,
        "is_active": promo.is_active,
    }


def order_from_record(record: OrderRecord, rules: PricingRules) -> Order:
    currency = record.currency

    def money(amount: int) -> Money:
        return Money(amount, currency)

    return Order(
        order_id=record.order_id,
        variant=ServiceVariant(
            variant_id=record.variant_id,
            base_price=money(record.base_price),
            eta_days=record.eta_days,
            name=record.variant_name,
        ),
        quantity=record.quantity,
        delivery_type=DeliveryType(record.delivery_type),
        customer=CustomerInfo(
            name=record.customer_name,
            phone=record.customer_phone,
            email=record.customer_email,
            address=record.customer_address,
        ),
        created_at=record.created_at,
        delivery_fee=money(record.delivery_fee),
        fines=decode_fines(record.fines, rules, currency),
        other_fees=money(record.other_fees),
        discount=money(record.discount),
        promo_code=promo_from_record(record.promo) if record.promo_id else None,
        discount_amount=money(record.discount_amount),
        total_amount=money(record.total_amount),
        paid_amount=money(record.paid_amount),
        remaining_amount=money(record.remaining_amount),
        status=OrderStatus(record.status),
        completed_at=record.completed_at,
        updated_at=record.updated_at,
        recorded_promo_ids=tuple(record.recorded_promo_ids or ()),
        requires_review=record.requires_review,
        review_notes=tuple(record.review_notes or ()),
        version=record.version,
    )


def order_to_fields(order: Order) -> dict:
    return {
        "variant_id": order.variant.variant_id,
        "variant_name": order.variant.name,
        "base_price": order.variant.base_price.amount,
        "eta_days": order.variant.eta_days,
        "quantity": order.quantity,
        "currency": order.currency,
        "customer_name": order.customer.name,
        "customer_phone": order.customer.phone,
        "customer_email": order.customer.email,
        "customer_address": order.customer.address,
        "delivery_type": order.delivery_type.value,
        "delivery_fee": order.delivery_fee.amount,
        "fines": encode_fines(order.fines),
        "other_fees": order.other_fees.amount,
        "discount": order.discount.amount,
        "promo_id": order.promo_code.promo_id if order.promo_code is not None else None,
        "discount_amount": order.discount_amount.amount,
        "total_amount": order.total_amount.amount,
        "paid_amount": order.paid_amount.amount,
        "remaining_amount": order.remaining_amount.amount,
        "recorded_promo_ids": list(order.recorded_promo_ids),
        "status": order.status.value,
        "requires_review": order.requires_review,
        "review_notes": list(order.review_notes),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "completed_at": order.completed_at,
    }


# ══════════════════════════════════════════════════════════════
# REPOSITORY
# ══════════════════════════════════════════════════════════════

class DjangoOrderRepository:
    def __init__(self, rules: PricingRules | None = None):
        self._rules = rules or PricingRules()

    # ── orders ───────────────────────────────────────────────

    def next_order_id(self) -> str:
        with transaction.atomic():
            sequence, _ = (
                OrderSequence.objects.select_for_update()
                .get_or_create(name=ORDER_SEQUENCE_NAME, defaults={"value": 0})
            )
            sequence.value += 1
            sequence.save(update_fields=["value"])
            return format_order_number(sequence.value)

    def load_order(self, order_id: str) -> Order:
        try:
            record = OrderRecord.objects.select_related("promo").get(order_id=order_id)
        except OrderRecord.DoesNotExist:
            raise OrderNotFoundError(order_id) from None
        return order_from_record(record, self._rules)

    def save_order(self, order: Order) -> Order:
        fields = order_to_fields(order)
        new_version = order.version + 1
        with transaction.atomic():
            if order.version == 0:
                try:
                    with transaction.atomic():
                        OrderRecord.objects.create(
                            order_id=order.order_id, version=new_version, **fields,
                        )
                except IntegrityError as exc:
                    raise ConcurrentModificationError(order.order_id, order.version) from exc
            else:
                updated = OrderRecord.objects.filter(
                    order_id=order.order_id, version=order.version,
                ).update(version=new_version, **fields)
                if updated != 1:
                    raise ConcurrentModificationError(order.order_id, order.version)

        logger.debug(f"Order {order.order_id} saved at version {new_version}")
        return self.load_order(order.order_id)

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        created_before: Optional[datetime] = None,
    ) -> List[Order]:
        query = OrderRecord.objects.select_related("promo").order_by("created_at", "order_id")
        if status is not None:
            query = query.filter(status=status.value)
        if created_before is not None:
            query = query.filter(created_at__lt=created_before)
        return [order_from_record(record, self._rules) for record in query]

    # ── promo codes ──────────────────────────────────────────

    def add_promo_code(self, promo: PromoCode) -> None:
        PromoCodeRecord.objects.update_or_create(
            promo_id=promo.promo_id, defaults=promo_to_fields(promo),
        )

    def load_promo_code(self, code: str) -> Optional[PromoCode]:
        record = PromoCodeRecord.objects.filter(code=code).first()
        return promo_from_record(record) if record is not None else None

    def get_promo_by_id(self, promo_id: str) -> Optional[PromoCode]:
        record = PromoCodeRecord.objects.filter(promo_id=promo_id).first()
        return promo_from_record(record) if record is not None else None

    def record_promo_usage(self, promo_id: str, expected_usage: int) -> bool:
        updated = (
            PromoCodeRecord.objects.filter(promo_id=promo_id, current_usage=expected_usage)
            .filter(Q(usage_limit__isnull=True) | Q(usage_limit__gt=expected_usage))
            .update(current_usage=F("current_usage") + 1)
        )
        if updated != 1:
            logger.info(
                f"Promo {promo_id} usage CAS missed (expected {expected_usage})"
            )
        return updated == 1
