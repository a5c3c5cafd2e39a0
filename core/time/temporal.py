"""
GovServe Core Time - Temporal Helpers
=====================================
Pure functions for time interval logic.
All functions take explicit datetime arguments - no hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


# ══════════════════════════════════════════════════════════════
# VALIDITY WINDOW - closed interval, either bound may be open
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidityWindow:
    """
    A closed time interval [start, end]. A missing bound is unbounded.

    Invariant: start <= end when both are set (enforced at construction).
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(
                f"ValidityWindow start ({self.start}) must be <= end ({self.end})."
            )

    def contains(self, dt: datetime) -> bool:
        """Check if datetime falls within window (inclusive)."""
        if self.start is not None and dt < self.start:
            return False
        if self.end is not None and dt > self.end:
            return False
        return True

    def has_started(self, dt: datetime) -> bool:
        return self.start is None or dt >= self.start


# ══════════════════════════════════════════════════════════════
# PURE TEMPORAL FUNCTIONS
# ══════════════════════════════════════════════════════════════

def is_expired(issued_at: datetime, ttl: timedelta, now: datetime) -> bool:
    """
    Check if something issued at `issued_at` has outlived `ttl`.

    All arguments are explicit - no hidden clock.
    """
    return now - issued_at > ttl
