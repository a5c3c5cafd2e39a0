"""
GovServe Money Primitive - Integer Minor Units
==============================================
Used by: Orders Engine (pricing, payments, promo discounts, receipts).

RULES (NON-NEGOTIABLE):
- All amounts use integer minor units (cents/piastres) - NO floats
- Money is never negative; signed values exist only as MoneyDelta
- Currency is explicit on every monetary value
- Arithmetic never mixes currencies

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from core.primitives.errors import InvalidAmountError, NegativeAmountError

DEFAULT_CURRENCY = "EGP"

Percent = Union[int, Decimal]


def _check_currency(currency: str) -> None:
    if not currency or not isinstance(currency, str):
        raise ValueError("currency must be a non-empty ISO 4217 string.")
    if len(currency) != 3:
        raise ValueError(
            f"currency must be 3-letter ISO 4217 code, got '{currency}'."
        )


def _check_int(amount) -> None:
    # bool is an int subclass; True is not a price.
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(
            f"Money amount must be int (minor units), "
            f"got {type(amount).__name__}. "
            f"Use cents/piastres, not decimals."
        )


# ══════════════════════════════════════════════════════════════
# MONEY VALUE OBJECT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Money:
    """
    Non-negative monetary value in integer minor units.

    Rules:
    - amount is in minor units (e.g. 1050 = 10.50 EGP)
    - currency is ISO 4217 (e.g. "EGP", "USD")
    - No floats ever. Integer arithmetic only.
    """
    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        _check_int(self.amount)
        _check_currency(self.currency)
        if self.amount < 0:
            raise NegativeAmountError(self.amount)

    # ── constructors ─────────────────────────────────────────

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount=0, currency=currency)

    @classmethod
    def sum_of(cls, values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        total = cls.zero(currency)
        for value in values:
            total = total.add(value)
        return total

    # ── arithmetic ───────────────────────────────────────────

    def add(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: Money, *, signed: bool = False) -> Union[Money, MoneyDelta]:
        """
        Subtract other from self.

        Raises NegativeAmountError when the result would be negative,
        unless signed=True, in which case a MoneyDelta is returned.
        """
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if signed:
            return MoneyDelta(amount=result, currency=self.currency)
        if result < 0:
            raise NegativeAmountError(result, operation="subtract")
        return Money(amount=result, currency=self.currency)

    def subtract_clamped(self, other: Money) -> Money:
        """Subtract, flooring the result at zero."""
        self._assert_same_currency(other)
        return Money(amount=max(0, self.amount - other.amount), currency=self.currency)

    def multiply(self, quantity: int) -> Money:
        _check_int(quantity)
        if quantity < 0:
            raise InvalidAmountError(f"quantity must be >= 0, got {quantity}.")
        return Money(amount=self.amount * quantity, currency=self.currency)

    def percent_of(self, value: Percent) -> Money:
        """
        Return value% of this amount, rounded half up to a minor unit.

        value is a percentage (10 means 10%), int or Decimal.
        """
        if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
            raise InvalidAmountError(
                f"percentage must be int or Decimal, got {type(value).__name__}."
            )
        if value < 0:
            raise InvalidAmountError(f"percentage must be >= 0, got {value}.")
        raw = Decimal(self.amount) * Decimal(value) / Decimal(100)
        rounded = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return Money(amount=rounded, currency=self.currency)

    def min(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return self if self.amount <= other.amount else other

    def max(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return self if self.amount >= other.amount else other

    def is_zero(self) -> bool:
        return self.amount == 0

    # ── comparison ───────────────────────────────────────────

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def __add__(self, other: Money) -> Money:
        return self.add(other)

    def _assert_same_currency(self, other) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot operate with {type(other).__name__}.")
        if self.currency != other.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} vs {other.currency}. "
                f"Cross-currency operations require explicit conversion."
            )

    def format(self) -> str:
        """Render as major.minor, e.g. 10050 -> '100.50'."""
        return f"{self.amount // 100}.{self.amount % 100:02d}"

    def to_dict(self) -> dict:
        return {"amount": self.amount, "currency": self.currency}


# ══════════════════════════════════════════════════════════════
# SIGNED DELTA (receipt discount lines only)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MoneyDelta:
    """Signed amount in minor units. Not a price; never stored on an order."""
    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        _check_int(self.amount)
        _check_currency(self.currency)

    @classmethod
    def negative_of(cls, value: Money) -> MoneyDelta:
        return cls(amount=-value.amount, currency=value.currency)

    def is_negative(self) -> bool:
        return self.amount < 0

    def format(self) -> str:
        sign = "-" if self.amount < 0 else ""
        magnitude = abs(self.amount)
        return f"{sign}{magnitude // 100}.{magnitude % 100:02d}"
