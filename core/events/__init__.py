"""
GovServe Event Bus - Public API
===============================
Operations decide. The bus distributes what was decided.
"""

from core.events.dispatcher import DeliveryFailure, DispatchResult, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    UnknownSubscriptionError,
)
from core.events.registry import Subscription, SubscriberRegistry

__all__ = [
    "dispatch",
    "DispatchResult",
    "DeliveryFailure",
    "Subscription",
    "SubscriberRegistry",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
    "UnknownSubscriptionError",
]
