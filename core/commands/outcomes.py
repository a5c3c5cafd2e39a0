"""
GovServe Command Layer - Outcome Contract
=========================================
Every operation produces exactly one Outcome. No exceptions.

ACCEPTED → operation applied, `value` holds the result.
REJECTED → operation denied, `error` is mandatory and typed.

Rules:
- Exactly one outcome per operation
- Outcome is immutable (frozen dataclass)
- REJECTED must contain an error (DomainRuleError)
- ACCEPTED must NOT contain an error
- Warnings never block; they only ride along an ACCEPTED outcome
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from core.commands.rejection import DomainRuleError, RejectionReason

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════
# OUTCOME STATUS
# ══════════════════════════════════════════════════════════════

class OutcomeStatus(Enum):
    """Binary decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# CONSISTENCY WARNING
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ConsistencyWarning:
    """
    A non-blocking finding flagged for manual admin review.

    Example: paid amount exceeds a recomputed total after an admin
    edit. The edit is kept; reconciliation happens out of band.
    """

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")
        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details or {}),
        }


# ══════════════════════════════════════════════════════════════
# OUTCOME
# ══════════════════════════════════════════════════════════════

class OutcomeError(RuntimeError):
    """Raised when unwrapping the wrong side of an Outcome."""
    pass


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Discriminated result of a domain operation.

    Fields:
        status:   ACCEPTED or REJECTED.
        value:    Result value (ACCEPTED only).
        error:    DomainRuleError (REJECTED only).
        warnings: Non-blocking ConsistencyWarnings (ACCEPTED only).

    Invariants:
        - REJECTED + error is None → ValueError
        - ACCEPTED + error is not None → ValueError
    """

    status: OutcomeStatus
    value: Optional[T] = None
    error: Optional[DomainRuleError] = None
    warnings: Tuple[ConsistencyWarning, ...] = ()

    def __post_init__(self):
        if not isinstance(self.status, OutcomeStatus):
            raise ValueError(
                f"status must be OutcomeStatus, got {type(self.status).__name__}."
            )

        if self.status == OutcomeStatus.REJECTED:
            if not isinstance(self.error, DomainRuleError):
                raise ValueError(
                    "REJECTED outcome must include a DomainRuleError. "
                    "No silent rejections allowed."
                )
            if self.warnings:
                raise ValueError("REJECTED outcome must not carry warnings.")

        if self.status == OutcomeStatus.ACCEPTED and self.error is not None:
            raise ValueError("ACCEPTED outcome must NOT include an error.")

    @classmethod
    def accepted(
        cls, value: T, warnings: Tuple[ConsistencyWarning, ...] = (),
    ) -> Outcome[T]:
        return cls(status=OutcomeStatus.ACCEPTED, value=value, warnings=tuple(warnings))

    @classmethod
    def rejected(cls, error: DomainRuleError) -> Outcome[T]:
        return cls(status=OutcomeStatus.REJECTED, error=error)

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def reason(self) -> Optional[RejectionReason]:
        return self.error.to_reason() if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value of an ACCEPTED outcome."""
        if self.is_rejected:
            raise OutcomeError(
                f"Cannot unwrap a rejected outcome: {self.error.code}: {self.error.message}"
            )
        return self.value

    def with_warnings(self, *warnings: ConsistencyWarning) -> Outcome[T]:
        if self.is_rejected:
            raise OutcomeError("Cannot attach warnings to a rejected outcome.")
        return Outcome.accepted(self.value, self.warnings + tuple(warnings))

    def to_dict(self) -> dict:
        """Serialize the decision (not the value) for audit and API layers."""
        return {
            "status": self.status.value,
            "reason": self.reason.to_dict() if self.reason else None,
            "warnings": [w.to_dict() for w in self.warnings],
        }
