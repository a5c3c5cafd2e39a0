"""
GovServe Core Config - Admin-Configurable Pricing Rules
=======================================================
Doctrine: No hardcoded fee policy in engine logic.
The per-fine surcharge, payment tolerance, payment timeout and
lost-report markers come from configuration, not from source code.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import Any, Mapping, Optional, Protocol, Tuple

from core.primitives.money import DEFAULT_CURRENCY, Money


# ══════════════════════════════════════════════════════════════
# PRICING RULES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PricingRules:
    """
    Fee policy and reconciliation settings for the orders engine.

    All monetary values are integer minor units. `currency` is the
    default for boundary decoding; amounts applied to an order are
    taken in that order's currency.
    """

    currency: str = DEFAULT_CURRENCY
    fine_surcharge_minor: int = 1000  # 10.00 per non-lost-report fine
    payment_tolerance_minor: int = 0
    payment_timeout_minutes: int = 30
    promo_usage_retries: int = 3
    lost_report_markers: Tuple[str, ...] = ("محضر", "فقد", "lost report")

    def __post_init__(self) -> None:
        for name in (
            "fine_surcharge_minor",
            "payment_tolerance_minor",
            "payment_timeout_minutes",
            "promo_usage_retries",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}.")
        if self.payment_timeout_minutes == 0:
            raise ValueError("payment_timeout_minutes must be > 0.")

    def fine_surcharge_in(self, currency: str) -> Money:
        return Money(self.fine_surcharge_minor, currency)

    def payment_tolerance_in(self, currency: str) -> Money:
        return Money(self.payment_tolerance_minor, currency)

    @property
    def payment_timeout(self) -> timedelta:
        return timedelta(minutes=self.payment_timeout_minutes)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> PricingRules:
        """
        Build rules from a settings mapping (e.g. settings.ORDER_PRICING).

        Unknown keys are rejected so typos do not silently fall back
        to defaults.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown pricing rule keys: {unknown}.")
        values = dict(data)
        if "lost_report_markers" in values:
            values["lost_report_markers"] = tuple(values["lost_report_markers"])
        return cls(**values)


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for admin-configured rule storage.

    Implementations may back this with Django settings, a database,
    or an in-memory store.
    """

    def get_pricing_rules(self) -> PricingRules:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

@dataclass
class InMemoryConfigStore:
    """Simple in-memory config store for testing and bootstrap."""

    pricing_rules: PricingRules = field(default_factory=PricingRules)

    def set_pricing_rules(self, rules: PricingRules) -> None:
        self.pricing_rules = rules

    def get_pricing_rules(self) -> PricingRules:
        return self.pricing_rules


class SettingsConfigStore:
    """Reads `ORDER_PRICING` from the active Django settings module."""

    def __init__(self, setting_name: str = "ORDER_PRICING") -> None:
        self._setting_name = setting_name

    def get_pricing_rules(self) -> PricingRules:
        from django.conf import settings

        return PricingRules.from_mapping(getattr(settings, self._setting_name, None))
