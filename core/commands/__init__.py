"""
GovServe Command Layer - Outcomes & Rejections
==============================================
Every operation produces exactly one Outcome.
REJECTED outcomes are first-class citizens: a domain rule
violation is returned, never raised.
"""

from core.commands.outcomes import (
    ConsistencyWarning,
    Outcome,
    OutcomeError,
    OutcomeStatus,
)
from core.commands.rejection import (
    DomainRuleError,
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "Outcome",
    "OutcomeStatus",
    "OutcomeError",
    "ConsistencyWarning",
    "DomainRuleError",
    "ReasonCode",
    "RejectionReason",
]
