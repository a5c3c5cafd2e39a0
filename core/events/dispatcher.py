"""
GovServe Event Bus - Dispatcher
===============================
Delivers a published event to its subscribers, in order.

A failing subscriber is logged and reported in the result; the
remaining subscribers still run and the order change that
produced the event stays saved.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List

from core.events.registry import SubscriberRegistry

logger = logging.getLogger("govserve.events")


@dataclass(frozen=True)
class DeliveryFailure:
    subscriber: str
    handler: str
    error_type: str
    error: str


@dataclass(frozen=True)
class DispatchResult:
    event_type: str
    event_id: str
    delivered: int = 0
    failures: List[DeliveryFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "delivered": self.delivered,
            "failed": self.failed,
            "failures": [vars(failure) for failure in self.failures],
        }


def dispatch(event: Any, registry: SubscriberRegistry) -> DispatchResult:
    """
    Deliver `event` (anything exposing event_type and event_id) to
    every subscription for its type. Never raises for a handler.
    """
    event_type = event.event_type
    event_id = str(event.event_id)
    delivered = 0
    failures: List[DeliveryFailure] = []

    for subscription in registry.subscriptions_for(event_type):
        try:
            subscription.handler(event)
        except Exception as exc:
            failures.append(DeliveryFailure(
                subscriber=subscription.subscriber,
                handler=subscription.handler_name,
                error_type=type(exc).__name__,
                error=str(exc),
            ))
            logger.error(
                f"{subscription.subscriber} failed on {event_type} "
                f"(event_id: {event_id}): {exc}",
                exc_info=True,
            )
        else:
            delivered += 1

    if delivered or failures:
        logger.info(
            f"Dispatched {event_type} (event_id: {event_id}): "
            f"{delivered} delivered, {len(failures)} failed"
        )
    else:
        logger.debug(f"No subscribers for {event_type} (event_id: {event_id})")
    return DispatchResult(event_type, event_id, delivered, failures)
