"""
GovServe Django ORM Adapter - Service Wiring
============================================
Builds an OrderLifecycleService backed by the ORM, with pricing
rules read from settings.ORDER_PRICING.
"""

from __future__ import annotations

from adapters.django_orm.repository import DjangoOrderRepository
from core.config.rules import ConfigStore, SettingsConfigStore
from core.events.registry import SubscriberRegistry
from core.time.clock import Clock
from engines.orders.events import EventBusSink, EventSink
from engines.orders.services import OrderLifecycleService


def build_order_service(
    *,
    config_store: ConfigStore | None = None,
    event_sink: EventSink | None = None,
    registry: SubscriberRegistry | None = None,
    clock: Clock | None = None,
) -> OrderLifecycleService:
    rules = (config_store or SettingsConfigStore()).get_pricing_rules()
    return OrderLifecycleService(
        repository=DjangoOrderRepository(rules),
        event_sink=event_sink or EventBusSink(registry),
        clock=clock,
        rules=rules,
    )
