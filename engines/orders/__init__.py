"""
GovServe Orders Engine
======================
Order pricing, promo codes, payments and the status lifecycle for
government-document service orders.
"""

from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Fine,
    Order,
    OrderStatus,
    PromoCode,
    PromoType,
    ServiceVariant,
    ValidPromo,
)
from engines.orders.pricing import PriceBreakdown, PricingEngine, receipt_lines
from engines.orders.policies import validate_promo_code
from engines.orders.services import OrderLifecycleService
from engines.orders.workflow import ORDER_WORKFLOW, OrderStateMachine

__all__ = [
    "CustomerInfo",
    "DeliveryType",
    "Fine",
    "Order",
    "OrderStatus",
    "PromoCode",
    "PromoType",
    "ServiceVariant",
    "ValidPromo",
    "PriceBreakdown",
    "PricingEngine",
    "receipt_lines",
    "validate_promo_code",
    "OrderLifecycleService",
    "ORDER_WORKFLOW",
    "OrderStateMachine",
]
