"""
GovServe Orders Engine - Domain Events
======================================
Events emitted AFTER an order change is persisted. Consumers
(customer notifications, staff email, WhatsApp) subscribe through
the event bus; the orders engine never sends a notification itself.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from core.events.dispatcher import dispatch
from core.events.registry import SubscriberRegistry

ORDER_CREATED_V1 = "orders.order.created.v1"
ORDER_STATUS_CHANGED_V1 = "orders.status.changed.v1"
ORDER_PAYMENT_RECORDED_V1 = "orders.payment.recorded.v1"
ORDER_PROMO_APPLIED_V1 = "orders.promo.applied.v1"
ORDER_PROMO_REMOVED_V1 = "orders.promo.removed.v1"

ORDER_EVENT_TYPES = (
    ORDER_CREATED_V1,
    ORDER_STATUS_CHANGED_V1,
    ORDER_PAYMENT_RECORDED_V1,
    ORDER_PROMO_APPLIED_V1,
    ORDER_PROMO_REMOVED_V1,
)


@dataclass(frozen=True)
class OrderCreated:
    order_id: str
    final_total: int
    at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    event_type: str = ORDER_CREATED_V1

    def to_payload(self) -> dict:
        return {
            "order_id": self.order_id,
            "final_total": self.final_total,
            "at": self.at.isoformat(),
        }


@dataclass(frozen=True)
class StatusChanged:
    order_id: str
    from_status: str
    to_status: str
    at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    event_type: str = ORDER_STATUS_CHANGED_V1

    def to_payload(self) -> dict:
        return {
            "order_id": self.order_id,
            "from": self.from_status,
            "to": self.to_status,
            "at": self.at.isoformat(),
        }


@dataclass(frozen=True)
class PaymentRecorded:
    order_id: str
    amount: int
    remaining: int
    at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    event_type: str = ORDER_PAYMENT_RECORDED_V1

    def to_payload(self) -> dict:
        return {
            "order_id": self.order_id,
            "amount": self.amount,
            "remaining": self.remaining,
            "at": self.at.isoformat(),
        }


@dataclass(frozen=True)
class PromoApplied:
    order_id: str
    code: str
    discount_amount: int
    at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    event_type: str = ORDER_PROMO_APPLIED_V1

    def to_payload(self) -> dict:
        return {
            "order_id": self.order_id,
            "code": self.code,
            "discount_amount": self.discount_amount,
            "at": self.at.isoformat(),
        }


@dataclass(frozen=True)
class PromoRemoved:
    order_id: str
    code: str
    at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    event_type: str = ORDER_PROMO_REMOVED_V1

    def to_payload(self) -> dict:
        return {"order_id": self.order_id, "code": self.code, "at": self.at.isoformat()}


class EventSink(Protocol):
    def publish(self, event: Any) -> None: ...


class EventBusSink:
    """Publishes events to in-process subscribers via the event bus."""

    def __init__(self, registry: SubscriberRegistry | None = None):
        self._registry = registry or SubscriberRegistry()

    @property
    def registry(self) -> SubscriberRegistry:
        return self._registry

    def publish(self, event: Any) -> None:
        dispatch(event, self._registry)
