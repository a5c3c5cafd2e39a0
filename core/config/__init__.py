"""
GovServe Core Config - Public API
=================================
Admin-configurable pricing rules.
Doctrine: No hardcoded fee policy in engine logic.
"""

from core.config.rules import (
    ConfigStore,
    InMemoryConfigStore,
    PricingRules,
    SettingsConfigStore,
)

__all__ = [
    "PricingRules",
    "ConfigStore",
    "InMemoryConfigStore",
    "SettingsConfigStore",
]
