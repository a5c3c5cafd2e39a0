"""
GovServe Core Time - Public API
===============================
Explicit clock protocol and temporal helpers.
Doctrine: NO datetime.now() in engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
)
from core.time.temporal import (
    ValidityWindow,
    is_expired,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "ValidityWindow",
    "is_expired",
]
