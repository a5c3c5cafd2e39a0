"""
GovServe Event Bus - Errors
===========================
Raised at subscription time. Dispatch itself never raises on
behalf of a subscriber.
"""


class EventBusError(Exception):
    """Base error for event bus wiring."""
    pass


class InvalidEventTypeFormat(EventBusError):
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"Event type '{event_type}' must look like "
            f"'area.entity.action.v<N>' (e.g. 'orders.status.changed.v1')."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, subscriber: str):
        self.event_type = event_type
        self.subscriber = subscriber
        super().__init__(
            f"Subscriber '{subscriber}' already has this handler "
            f"on '{event_type}'."
        )


class UnknownSubscriptionError(EventBusError):
    def __init__(self, event_type: str, subscriber: str):
        self.event_type = event_type
        self.subscriber = subscriber
        super().__init__(
            f"No subscription of '{subscriber}' on '{event_type}' to remove."
        )
