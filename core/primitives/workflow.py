"""
GovServe Workflow Primitive - Generic State Machine
===================================================
A generic, deterministic state machine definition used by engines
that track lifecycle state.

Used by:
    Orders Engine - Order states
        (PENDING → IN_PROGRESS → UNDER_REVIEW → COMPLETED | CANCELLED)

RULES (NON-NEGOTIABLE):
- State transitions are deterministic (same input → same output)
- Invalid transitions REJECTED - no silent state skips
- Terminal states have no outgoing edges
- State machine definition is immutable (frozen)

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional


# ══════════════════════════════════════════════════════════════
# TRANSITION RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StateTransition:
    """
    An immutable record of a single state transition.
    """
    subject_id: str
    from_state: str
    to_state: str
    transitioned_at: datetime
    actor_id: Optional[str] = None
    reason: str = ""

    def __post_init__(self):
        if not self.subject_id or not isinstance(self.subject_id, str):
            raise ValueError("subject_id must be non-empty string.")
        if not self.from_state or not isinstance(self.from_state, str):
            raise ValueError("from_state must be non-empty string.")
        if not self.to_state or not isinstance(self.to_state, str):
            raise ValueError("to_state must be non-empty string.")
        if not isinstance(self.transitioned_at, datetime):
            raise ValueError("transitioned_at must be a datetime.")

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "from_state": self.from_state,
            "to_state": self.to_state,
            "transitioned_at": self.transitioned_at.isoformat(),
            "actor_id": self.actor_id,
            "reason": self.reason,
        }


# ══════════════════════════════════════════════════════════════
# WORKFLOW DEFINITION (state machine schema)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Defines the valid states and transitions for a workflow type.

    This is the STATE MACHINE SCHEMA, shared across all instances
    of a given workflow type (e.g. all service orders).

    Fields:
        name:            Identifier for this workflow type (e.g. "ServiceOrder")
        initial_state:   Starting state for all new instances
        terminal_states: States from which no further transitions are allowed
        transitions:     Dict of {from_state → frozenset(allowed_to_states)}
    """
    name: str
    initial_state: str
    terminal_states: FrozenSet[str]
    transitions: Dict[str, FrozenSet[str]]

    def __post_init__(self):
        if not self.name:
            raise ValueError("Workflow name must be non-empty.")
        if not self.initial_state:
            raise ValueError("initial_state must be non-empty.")
        if self.initial_state not in self.transitions:
            raise ValueError(
                f"initial_state '{self.initial_state}' not in transitions."
            )
        for state in self.terminal_states:
            if self.transitions.get(state):
                raise ValueError(
                    f"terminal state '{state}' must not have outgoing transitions."
                )
        unknown = set().union(*self.transitions.values()) - set(self.transitions)
        if unknown:
            raise ValueError(f"transitions target undeclared states: {sorted(unknown)}.")

    def is_valid_transition(self, from_state: str, to_state: str) -> bool:
        """Check if a transition is allowed by this definition."""
        allowed = self.transitions.get(from_state, frozenset())
        return to_state in allowed

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def allowed_next_states(self, from_state: str) -> FrozenSet[str]:
        return self.transitions.get(from_state, frozenset())

    @property
    def states(self) -> FrozenSet[str]:
        return frozenset(self.transitions.keys())
