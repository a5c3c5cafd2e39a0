"""
GovServe Orders Engine - Request Validation
===========================================
Input-shape checks for every lifecycle operation.

Requests are frozen dataclasses that validate in __post_init__
and raise ValidationError. They run BEFORE any pricing or state
change, so a malformed request never reaches the repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.primitives.errors import InvalidAmountError, ValidationError
from core.primitives.money import Money
from engines.orders.errors import InvalidQuantityError
from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Fine,
    OrderStatus,
    ServiceVariant,
)


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().upper())
        except ValueError:
            pass
    valid = sorted(member.value for member in enum_cls)
    raise ValidationError(f"{field_name} '{value}' not valid. Expected one of {valid}.")


def _check_money(value, field_name: str, currency: str) -> None:
    if not isinstance(value, Money):
        raise ValidationError(f"{field_name} must be Money, got {type(value).__name__}.")
    if value.currency != currency:
        raise ValidationError(
            f"{field_name} currency {value.currency} does not match order currency {currency}."
        )


def check_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(quantity)


@dataclass(frozen=True)
class CreateOrderRequest:
    variant: ServiceVariant
    quantity: int
    delivery_type: DeliveryType
    customer: CustomerInfo
    delivery_fee: Optional[Money] = None
    fines: Tuple[Fine, ...] = ()
    other_fees: Optional[Money] = None
    discount: Optional[Money] = None

    def __post_init__(self):
        if not isinstance(self.variant, ServiceVariant):
            raise ValidationError("variant must be ServiceVariant.")
        check_quantity(self.quantity)
        object.__setattr__(
            self, "delivery_type",
            _coerce_enum(DeliveryType, self.delivery_type, "delivery_type"),
        )
        if not isinstance(self.customer, CustomerInfo):
            raise ValidationError("customer must be CustomerInfo.")
        currency = self.variant.base_price.currency
        for name in ("delivery_fee", "other_fees", "discount"):
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, Money.zero(currency))
            else:
                _check_money(value, name, currency)
        object.__setattr__(self, "fines", tuple(self.fines))
        for fine in self.fines:
            if not isinstance(fine, Fine):
                raise ValidationError("fines must contain Fine values.")
            _check_money(fine.amount, f"fine '{fine.name}'", currency)


@dataclass(frozen=True)
class ApplyPromoCodeRequest:
    code: str

    def __post_init__(self):
        if not isinstance(self.code, str) or not self.code.strip():
            raise ValidationError("promo code must be non-empty.")
        object.__setattr__(self, "code", self.code.strip())


@dataclass(frozen=True)
class RecordPaymentRequest:
    amount: Money
    currency: str

    def __post_init__(self):
        _check_money(self.amount, "amount", self.currency)
        if self.amount.is_zero():
            raise InvalidAmountError("payment amount must be > 0.")


@dataclass(frozen=True)
class ChangeStatusRequest:
    target: OrderStatus

    def __post_init__(self):
        object.__setattr__(self, "target", _coerce_enum(OrderStatus, self.target, "status"))


@dataclass(frozen=True)
class UpdateChargesRequest:
    currency: str
    fines: Optional[Tuple[Fine, ...]] = None
    other_fees: Optional[Money] = None
    discount: Optional[Money] = None
    delivery_type: Optional[DeliveryType] = None
    delivery_fee: Optional[Money] = None

    def __post_init__(self):
        for name in ("other_fees", "discount", "delivery_fee"):
            value = getattr(self, name)
            if value is not None:
                _check_money(value, name, self.currency)
        if self.delivery_type is not None:
            object.__setattr__(
                self, "delivery_type",
                _coerce_enum(DeliveryType, self.delivery_type, "delivery_type"),
            )
        if self.fines is not None:
            object.__setattr__(self, "fines", tuple(self.fines))
            for fine in self.fines:
                if not isinstance(fine, Fine):
                    raise ValidationError("fines must contain Fine values.")
                _check_money(fine.amount, f"fine '{fine.name}'", self.currency)

    @property
    def is_empty(self) -> bool:
        return all(
            getattr(self, name) is None
            for name in ("fines", "other_fees", "discount", "delivery_type", "delivery_fee")
        )
