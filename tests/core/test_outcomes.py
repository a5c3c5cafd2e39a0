"""
Tests for core.commands - Outcome, RejectionReason, DomainRuleError.
"""

import pytest

from core.commands import (
    ConsistencyWarning,
    DomainRuleError,
    Outcome,
    OutcomeError,
    OutcomeStatus,
    RejectionReason,
)


class SampleRuleError(DomainRuleError):
    code = "SAMPLE_RULE"


def make_error():
    return SampleRuleError("Sample rule broken.", policy_name="sample_policy", limit=3)


class TestRejectionReason:
    def test_requires_fields(self):
        with pytest.raises(ValueError):
            RejectionReason(code="", message="m", policy_name="p")
        with pytest.raises(ValueError):
            RejectionReason(code="C", message="", policy_name="p")

    def test_to_dict(self):
        reason = RejectionReason(code="C", message="m", policy_name="p", details={"x": 1})
        assert reason.to_dict() == {
            "code": "C", "message": "m", "policy_name": "p", "details": {"x": 1},
        }


class TestDomainRuleError:
    def test_to_reason_carries_code_and_details(self):
        reason = make_error().to_reason()
        assert reason.code == "SAMPLE_RULE"
        assert reason.policy_name == "sample_policy"
        assert reason.details == {"limit": 3}

    def test_equality_by_type_code_message(self):
        assert make_error() == make_error()
        assert hash(make_error()) == hash(make_error())

    def test_default_code(self):
        error = DomainRuleError("nope", policy_name="p")
        assert error.code == "POLICY_VIOLATION"


class TestOutcome:
    def test_accepted(self):
        outcome = Outcome.accepted(42)
        assert outcome.is_accepted
        assert not outcome.is_rejected
        assert outcome.unwrap() == 42
        assert outcome.reason is None

    def test_rejected(self):
        outcome = Outcome.rejected(make_error())
        assert outcome.is_rejected
        assert outcome.reason.code == "SAMPLE_RULE"

    def test_unwrap_rejected_raises(self):
        with pytest.raises(OutcomeError, match="SAMPLE_RULE"):
            Outcome.rejected(make_error()).unwrap()

    def test_rejected_requires_error(self):
        with pytest.raises(ValueError, match="No silent rejections"):
            Outcome(status=OutcomeStatus.REJECTED)

    def test_accepted_must_not_carry_error(self):
        with pytest.raises(ValueError):
            Outcome(status=OutcomeStatus.ACCEPTED, value=1, error=make_error())

    def test_warnings(self):
        warning = ConsistencyWarning(code="W", message="check me")
        outcome = Outcome.accepted("x").with_warnings(warning)
        assert outcome.warnings == (warning,)
        assert outcome.value == "x"

    def test_cannot_warn_on_rejection(self):
        with pytest.raises(OutcomeError):
            Outcome.rejected(make_error()).with_warnings(ConsistencyWarning("W", "m"))

    def test_to_dict(self):
        data = Outcome.accepted(1, (ConsistencyWarning("W", "m"),)).to_dict()
        assert data["status"] == "ACCEPTED"
        assert data["reason"] is None
        assert data["warnings"][0]["code"] == "W"

        rejected = Outcome.rejected(make_error()).to_dict()
        assert rejected["status"] == "REJECTED"
        assert rejected["reason"]["code"] == "SAMPLE_RULE"
