"""
GovServe Core Primitives - Reusable Building Blocks
===================================================
Pure Python, immutable value objects shared by the engines.

Primitives:
    money     - Integer minor-unit Money and signed MoneyDelta
    workflow  - Generic state machine definitions
    errors    - Input-shape validation errors
"""

from core.primitives.errors import InvalidAmountError, NegativeAmountError, ValidationError
from core.primitives.money import DEFAULT_CURRENCY, Money, MoneyDelta
from core.primitives.workflow import StateTransition, WorkflowDefinition

__all__ = [
    "ValidationError",
    "NegativeAmountError",
    "InvalidAmountError",
    "DEFAULT_CURRENCY",
    "Money",
    "MoneyDelta",
    "StateTransition",
    "WorkflowDefinition",
]
