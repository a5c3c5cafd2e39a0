"""
GovServe Orders Engine - Domain Types
=====================================
Immutable snapshots of the records the pricing and lifecycle
logic works on. Every change produces a new snapshot through
dataclasses.replace; nothing is mutated in place.

Ownership:
    ServiceVariant - catalog reference data, read-only here
    PromoCode      - current_usage moves only via record_promo_usage
    Order.status   - moved only by the OrderStateMachine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from core.primitives.errors import ValidationError
from core.primitives.money import Money
from core.time.temporal import ValidityWindow


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class OrderStatus(Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    UNDER_REVIEW = "UNDER_REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class DeliveryType(Enum):
    OFFICE = "OFFICE"
    HOME = "HOME"


class PromoType(Enum):
    PERCENT = "PERCENT"
    FIXED = "FIXED"


# ══════════════════════════════════════════════════════════════
# REFERENCE DATA
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ServiceVariant:
    """A priced, timed option of a service (e.g. express vs standard)."""
    variant_id: str
    base_price: Money
    eta_days: int
    name: str = ""

    def __post_init__(self):
        if not self.variant_id:
            raise ValidationError("variant_id must be non-empty.")
        if not isinstance(self.base_price, Money):
            raise ValidationError("base_price must be Money.")
        if isinstance(self.eta_days, bool) or not isinstance(self.eta_days, int) or self.eta_days < 0:
            raise ValidationError("eta_days must be a non-negative integer.")


@dataclass(frozen=True)
class Fine:
    """
    A government-process charge attached to an order.

    A lost-report fine is kept out of the fines surcharge and
    counted under other fees instead.
    """
    name: str
    amount: Money
    is_lost_report: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValidationError("fine name must be non-empty.")
        if not isinstance(self.amount, Money):
            raise ValidationError("fine amount must be Money.")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "amount": self.amount.amount,
            "isLostReport": self.is_lost_report,
        }


@dataclass(frozen=True)
class PromoCode:
    """
    Discount voucher with eligibility and usage constraints.

    value is minor units for FIXED and a whole percentage for PERCENT.
    start_date / end_date may be None (window open on that side).
    """
    promo_id: str
    code: str
    promo_type: PromoType
    value: int
    min_order_amount: Money
    max_discount: Optional[Money] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    usage_limit: Optional[int] = None
    current_usage: int = 0
    is_active: bool = True

    def __post_init__(self):
        if not self.promo_id:
            raise ValidationError("promo_id must be non-empty.")
        if not self.code:
            raise ValidationError("code must be non-empty.")
        if not isinstance(self.promo_type, PromoType):
            raise ValidationError("promo_type must be PromoType.")
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            raise ValidationError("value must be a non-negative integer.")
        if self.promo_type == PromoType.PERCENT and self.value > 100:
            raise ValidationError("PERCENT promo value must be <= 100.")
        if (
            self.max_discount is not None
            and self.max_discount.currency != self.min_order_amount.currency
        ):
            raise ValidationError("max_discount and min_order_amount must share a currency.")
        if self.usage_limit is not None and self.usage_limit < 0:
            raise ValidationError("usage_limit must be >= 0.")
        if self.current_usage < 0:
            raise ValidationError("current_usage must be >= 0.")
        if self.usage_limit is not None and self.current_usage > self.usage_limit:
            raise ValidationError(
                f"current_usage ({self.current_usage}) exceeds "
                f"usage_limit ({self.usage_limit})."
            )

    @property
    def validity(self) -> ValidityWindow:
        return ValidityWindow(start=self.start_date, end=self.end_date)

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.current_usage >= self.usage_limit


@dataclass(frozen=True)
class ValidPromo:
    """A promo that passed validation, with the discount it yields."""
    promo: PromoCode
    discount_amount: Money


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("customer name must be non-empty.")
        if not self.phone or not self.phone.strip():
            raise ValidationError("customer phone must be non-empty.")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
        }


# ══════════════════════════════════════════════════════════════
# ORDER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Order:
    """
    A customer order for one service variant.

    Money fields are stored results of the last pricing run:
    total_amount is the final total, remaining_amount is what is
    still owed. discount is the staff discount; discount_amount is
    the promo discount.

    recorded_promo_ids lists every promo whose usage this order
    has already consumed, so re-applying one is not counted twice.

    version is the optimistic-lock counter maintained by the
    repository.
    """
    order_id: str
    variant: ServiceVariant
    quantity: int
    delivery_type: DeliveryType
    customer: CustomerInfo
    created_at: datetime
    delivery_fee: Money = field(default_factory=Money.zero)
    fines: Tuple[Fine, ...] = ()
    other_fees: Money = field(default_factory=Money.zero)
    discount: Money = field(default_factory=Money.zero)
    promo_code: Optional[PromoCode] = None
    discount_amount: Money = field(default_factory=Money.zero)
    total_amount: Money = field(default_factory=Money.zero)
    paid_amount: Money = field(default_factory=Money.zero)
    remaining_amount: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.PENDING
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    recorded_promo_ids: Tuple[str, ...] = ()
    requires_review: bool = False
    review_notes: Tuple[str, ...] = ()
    version: int = 0

    def __post_init__(self):
        if not self.order_id:
            raise ValidationError("order_id must be non-empty.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(f"quantity must be int, got {type(self.quantity).__name__}.")
        if not isinstance(self.delivery_type, DeliveryType):
            raise ValidationError("delivery_type must be DeliveryType.")
        if not isinstance(self.status, OrderStatus):
            raise ValidationError("status must be OrderStatus.")
        if not isinstance(self.fines, tuple):
            object.__setattr__(self, "fines", tuple(self.fines))
        if not isinstance(self.recorded_promo_ids, tuple):
            object.__setattr__(self, "recorded_promo_ids", tuple(self.recorded_promo_ids))

    @property
    def currency(self) -> str:
        return self.variant.base_price.currency

    @property
    def has_promo(self) -> bool:
        return self.promo_code is not None

    @property
    def promo_usage_recorded(self) -> bool:
        """Usage was already counted for the promo currently applied."""
        return self.has_promo and self.promo_code.promo_id in self.recorded_promo_ids

    @property
    def is_fully_paid(self) -> bool:
        return self.remaining_amount.is_zero() and not self.paid_amount.is_zero()
