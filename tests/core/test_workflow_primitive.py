"""
Tests for core.primitives.workflow - generic state machine schema.
"""

from datetime import datetime, timezone

import pytest

from core.primitives.workflow import StateTransition, WorkflowDefinition


def ticket_workflow():
    return WorkflowDefinition(
        name="Ticket",
        initial_state="OPEN",
        terminal_states=frozenset({"CLOSED"}),
        transitions={
            "OPEN": frozenset({"WORKING", "CLOSED"}),
            "WORKING": frozenset({"CLOSED"}),
            "CLOSED": frozenset(),
        },
    )


class TestWorkflowDefinition:
    def test_valid_and_invalid_edges(self):
        workflow = ticket_workflow()
        assert workflow.is_valid_transition("OPEN", "WORKING")
        assert not workflow.is_valid_transition("WORKING", "OPEN")
        assert not workflow.is_valid_transition("UNKNOWN", "OPEN")

    def test_terminal(self):
        workflow = ticket_workflow()
        assert workflow.is_terminal("CLOSED")
        assert workflow.allowed_next_states("CLOSED") == frozenset()

    def test_states(self):
        assert ticket_workflow().states == frozenset({"OPEN", "WORKING", "CLOSED"})

    def test_initial_state_must_be_known(self):
        with pytest.raises(ValueError, match="initial_state"):
            WorkflowDefinition(
                name="Bad", initial_state="NEW",
                terminal_states=frozenset(), transitions={"OPEN": frozenset()},
            )

    def test_terminal_state_cannot_have_exits(self):
        with pytest.raises(ValueError, match="terminal state"):
            WorkflowDefinition(
                name="Bad", initial_state="OPEN",
                terminal_states=frozenset({"OPEN"}),
                transitions={"OPEN": frozenset({"OPEN"})},
            )


class TestStateTransition:
    def test_to_dict(self):
        at = datetime(2026, 3, 1, tzinfo=timezone.utc)
        record = StateTransition("T-1", "OPEN", "CLOSED", at, actor_id="staff-1")
        data = record.to_dict()
        assert data["from_state"] == "OPEN"
        assert data["transitioned_at"] == at.isoformat()
        assert data["actor_id"] == "staff-1"

    def test_requires_subject(self):
        with pytest.raises(ValueError):
            StateTransition("", "OPEN", "CLOSED", datetime(2026, 3, 1, tzinfo=timezone.utc))


class TestWorkflowTargets:
    def test_targets_must_be_declared(self):
        with pytest.raises(ValueError, match="undeclared"):
            WorkflowDefinition(
                name="Bad", initial_state="OPEN",
                terminal_states=frozenset(),
                transitions={"OPEN": frozenset({"LOST"})},
            )
