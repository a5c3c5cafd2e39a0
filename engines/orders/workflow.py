"""
GovServe Orders Engine - Order State Machine
============================================
The only code allowed to change Order.status.

    PENDING → IN_PROGRESS | CANCELLED
    IN_PROGRESS → UNDER_REVIEW | COMPLETED | CANCELLED
    UNDER_REVIEW → IN_PROGRESS | COMPLETED | CANCELLED
    COMPLETED, CANCELLED → terminal

A successful move to COMPLETED stamps completed_at. Every
successful move yields a StatusChanged event for the caller to
publish once the order is saved.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime

from core.commands.outcomes import Outcome
from core.primitives.workflow import StateTransition, WorkflowDefinition
from engines.orders.errors import InvalidTransitionError
from engines.orders.events import StatusChanged
from engines.orders.models import Order, OrderStatus

_S = OrderStatus

ORDER_WORKFLOW = WorkflowDefinition(
    name="ServiceOrder",
    initial_state=_S.PENDING.value,
    terminal_states=frozenset({_S.COMPLETED.value, _S.CANCELLED.value}),
    transitions={
        _S.PENDING.value: frozenset({_S.IN_PROGRESS.value, _S.CANCELLED.value}),
        _S.IN_PROGRESS.value: frozenset({
            _S.UNDER_REVIEW.value, _S.COMPLETED.value, _S.CANCELLED.value,
        }),
        _S.UNDER_REVIEW.value: frozenset({
            _S.IN_PROGRESS.value, _S.COMPLETED.value, _S.CANCELLED.value,
        }),
        _S.COMPLETED.value: frozenset(),
        _S.CANCELLED.value: frozenset(),
    },
)


@dataclass(frozen=True)
class Transitioned:
    order: Order
    event: StatusChanged
    record: StateTransition


class OrderStateMachine:
    def __init__(self, definition: WorkflowDefinition = ORDER_WORKFLOW):
        self._definition = definition

    def can_transition(self, current: OrderStatus, target: OrderStatus) -> bool:
        return self._definition.is_valid_transition(current.value, target.value)

    def allowed_targets(self, current: OrderStatus) -> frozenset:
        return frozenset(
            OrderStatus(state) for state in self._definition.allowed_next_states(current.value)
        )

    def transition(
        self, order: Order, target: OrderStatus, at: datetime, actor_id: str | None = None,
    ) -> Outcome[Transitioned]:
        current = order.status.value
        if not self._definition.is_valid_transition(current, target.value):
            return Outcome.rejected(InvalidTransitionError(
                current, target.value, self._definition.allowed_next_states(current),
            ))

        changes = {"status": target, "updated_at": at}
        if target == OrderStatus.COMPLETED:
            changes["completed_at"] = at
        updated = dataclasses.replace(order, **changes)

        record = StateTransition(
            subject_id=order.order_id,
            from_state=current,
            to_state=target.value,
            transitioned_at=at,
            actor_id=actor_id,
        )
        event = StatusChanged(
            order_id=order.order_id,
            from_status=current,
            to_status=target.value,
            at=at,
        )
        return Outcome.accepted(Transitioned(order=updated, event=event, record=record))
