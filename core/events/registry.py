"""
GovServe Event Bus - Subscriber Registry
========================================
Who listens to which order event. Customer notifications, staff
email and the WhatsApp gateway register here; the orders engine
only publishes.

Event types are versioned: area.entity.action.v<N>.
Subscriptions keep registration order, which is delivery order.
"""

import logging
import re
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, List, Tuple

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    UnknownSubscriptionError,
)

logger = logging.getLogger("govserve.events")

EVENT_TYPE_PATTERN = re.compile(r"^[a-z][a-z_]*(\.[a-z][a-z_]*){2,}\.v[1-9][0-9]*$")


@dataclass(frozen=True)
class Subscription:
    event_type: str
    handler: Callable[[Any], None]
    subscriber: str

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))


class SubscriberRegistry:
    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._lock = Lock()

    def subscribe(
        self, event_type: str, handler: Callable[[Any], None], subscriber: str,
    ) -> Subscription:
        """
        Register `handler` for `event_type` on behalf of `subscriber`
        (a short name used in logs and failure reports).
        """
        if not isinstance(event_type, str) or not EVENT_TYPE_PATTERN.match(event_type):
            raise InvalidEventTypeFormat(str(event_type))
        if not callable(handler):
            raise EventBusError(f"Handler must be callable, got {type(handler).__name__}.")
        if not subscriber:
            raise EventBusError("subscriber name must be non-empty.")

        subscription = Subscription(event_type, handler, subscriber)
        with self._lock:
            current = self._subscriptions.setdefault(event_type, [])
            if any(existing.handler is handler for existing in current):
                raise DuplicateSubscriberError(event_type, subscriber)
            current.append(subscription)

        logger.info(f"{subscriber} subscribed to {event_type} ({subscription.handler_name})")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            current = self._subscriptions.get(subscription.event_type, [])
            if subscription not in current:
                raise UnknownSubscriptionError(subscription.event_type, subscription.subscriber)
            current.remove(subscription)

    def subscriptions_for(self, event_type: str) -> Tuple[Subscription, ...]:
        with self._lock:
            return tuple(self._subscriptions.get(event_type, ()))

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self.subscriptions_for(event_type))

    def event_types(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(sorted(t for t, subs in self._subscriptions.items() if subs))
