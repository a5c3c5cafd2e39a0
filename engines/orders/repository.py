"""
GovServe Orders Engine - Data Access Contract
=============================================
The lifecycle service reads and writes orders and promo codes only
through OrderRepository. Implementations must guard
read-modify-write:

- save_order is optimistic: the stored version must equal
  order.version, otherwise ConcurrentModificationError.
- record_promo_usage is compare-and-swap: it increments
  current_usage only if it still equals expected_usage and the
  limit is not reached, and returns False otherwise.

InMemoryOrderRepository implements the contract for tests and
bootstrap; adapters.django_orm implements it over the ORM.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from threading import Lock
from typing import Dict, List, Optional, Protocol

from engines.orders.errors import ConcurrentModificationError, OrderNotFoundError
from engines.orders.models import Order, OrderStatus, PromoCode

ORDER_NUMBER_WIDTH = 6


def format_order_number(sequence: int) -> str:
    """Sequential order numbers: 1 → '000001'."""
    if sequence < 1:
        raise ValueError(f"order sequence must be >= 1, got {sequence}.")
    return str(sequence).zfill(ORDER_NUMBER_WIDTH)


class OrderRepository(Protocol):
    def next_order_id(self) -> str: ...

    def load_order(self, order_id: str) -> Order: ...

    def save_order(self, order: Order) -> Order: ...

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        created_before: Optional[datetime] = None,
    ) -> List[Order]: ...

    def load_promo_code(self, code: str) -> Optional[PromoCode]: ...

    def get_promo_by_id(self, promo_id: str) -> Optional[PromoCode]: ...

    def record_promo_usage(self, promo_id: str, expected_usage: int) -> bool: ...


class InMemoryOrderRepository:
    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._promos: Dict[str, PromoCode] = {}
        self._sequence = 0
        self._lock = Lock()

    # ── orders ───────────────────────────────────────────────

    def next_order_id(self) -> str:
        with self._lock:
            self._sequence += 1
            return format_order_number(self._sequence)

    def load_order(self, order_id: str) -> Order:
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def save_order(self, order: Order) -> Order:
        with self._lock:
            stored = self._orders.get(order.order_id)
            stored_version = stored.version if stored is not None else 0
            if stored_version != order.version:
                raise ConcurrentModificationError(order.order_id, order.version)
            saved = dataclasses.replace(order, version=order.version + 1)
            self._orders[order.order_id] = saved
        return saved

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        created_before: Optional[datetime] = None,
    ) -> List[Order]:
        with self._lock:
            orders = list(self._orders.values())
        if status is not None:
            orders = [o for o in orders if o.status == status]
        if created_before is not None:
            orders = [o for o in orders if o.created_at < created_before]
        return sorted(orders, key=lambda o: (o.created_at, o.order_id))

    # ── promo codes ──────────────────────────────────────────

    def add_promo_code(self, promo: PromoCode) -> None:
        with self._lock:
            self._promos[promo.code] = promo

    def load_promo_code(self, code: str) -> Optional[PromoCode]:
        with self._lock:
            return self._promos.get(code)

    def record_promo_usage(self, promo_id: str, expected_usage: int) -> bool:
        with self._lock:
            for code, promo in self._promos.items():
                if promo.promo_id != promo_id:
                    continue
                if promo.current_usage != expected_usage or promo.is_exhausted:
                    return False
                self._promos[code] = dataclasses.replace(
                    promo, current_usage=promo.current_usage + 1,
                )
                return True
        return False

    def get_promo_by_id(self, promo_id: str) -> Optional[PromoCode]:
        with self._lock:
            for promo in self._promos.values():
                if promo.promo_id == promo_id:
                    return promo
        return None
