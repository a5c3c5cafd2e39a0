"""
GovServe Command Layer - Rejection Model
========================================
Structured rejection reasons for denied operations.

This is NOT an event. It is an explanation structure that
UI layers render as a specific user-facing message, and that
becomes part of audit payloads.

Every rejection must be:
- Deterministic (same input → same rejection)
- Auditable (code + message + policy)
- Machine-readable (reason_code)
- Human-readable (message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected operation.

    Fields:
        code:        Machine-readable rejection code (e.g. 'PROMO_EXPIRED').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
        details:     Structured data for the renderer (amounts, states).

    This is serializable into event payload for audit trail.
    """

    code: str
    message: str
    policy_name: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        """Serialize for event payload."""
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
            "details": dict(self.details),
        }


# ══════════════════════════════════════════════════════════════
# DOMAIN RULE ERROR (carried, not raised)
# ══════════════════════════════════════════════════════════════

class DomainRuleError(Exception):
    """
    Base for business rule violations.

    Instances are returned inside a rejected Outcome, never raised
    out of a public operation. Subclasses set `code` and pass the
    policy that produced them.
    """

    code = "POLICY_VIOLATION"

    def __init__(self, message: str, *, policy_name: str, **details: Any):
        self.message = message
        self.policy_name = policy_name
        self.details = details
        super().__init__(message)

    def to_reason(self) -> RejectionReason:
        return RejectionReason(
            code=self.code,
            message=self.message,
            policy_name=self.policy_name,
            details=dict(self.details),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainRuleError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.code == other.code
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.code, self.message))


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes. Extensible by engines.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Promo codes ───────────────────────────────────────────
    PROMO_EXPIRED = "PROMO_EXPIRED"
    PROMO_INACTIVE = "PROMO_INACTIVE"
    PROMO_USAGE_EXCEEDED = "PROMO_USAGE_EXCEEDED"
    PROMO_BELOW_MINIMUM = "PROMO_BELOW_MINIMUM"
    PROMO_NOT_FOUND = "PROMO_NOT_FOUND"
    PROMO_ALREADY_APPLIED = "PROMO_ALREADY_APPLIED"
    PROMO_CURRENCY_MISMATCH = "PROMO_CURRENCY_MISMATCH"

    # ── Order lifecycle ───────────────────────────────────────
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # ── Payments ──────────────────────────────────────────────
    OVERPAYMENT = "OVERPAYMENT"
    INCONSISTENT_PAYMENT = "INCONSISTENT_PAYMENT"

    # ── Consistency warnings (non-blocking) ───────────────────
    PROMO_USAGE_CONFLICT = "PROMO_USAGE_CONFLICT"

    # ── General ───────────────────────────────────────────────
    POLICY_VIOLATION = "POLICY_VIOLATION"
