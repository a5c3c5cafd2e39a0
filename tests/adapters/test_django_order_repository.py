from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from adapters.django_orm.models import OrderRecord, PromoCodeRecord
from adapters.django_orm.repository import DjangoOrderRepository
from adapters.django_orm.wiring import build_order_service
from core.config.rules import InMemoryConfigStore, PricingRules
from core.primitives.money import Money
from core.time.clock import FixedClock
from engines.orders.errors import ConcurrentModificationError, OrderNotFoundError
from engines.orders.models import (
    CustomerInfo,
    DeliveryType,
    Fine,
    Order,
    OrderStatus,
    PromoCode,
    PromoType,
    ServiceVariant,
)

pytestmark = pytest.mark.django_db(transaction=True)

NOW = datetime(2026, 2, 21, 9, 0, 0, tzinfo=timezone.utc)


class RecordingSink:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)


def make_promo(**overrides) -> PromoCode:
    fields = dict(
        promo_id="promo-db-1",
        code="RAMADAN",
        promo_type=PromoType.PERCENT,
        value=10,
        min_order_amount=Money(5000),
        max_discount=Money(2000),
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=30),
        usage_limit=2,
        current_usage=0,
    )
    fields.update(overrides)
    return PromoCode(**fields)


def make_order(repository: DjangoOrderRepository, **overrides) -> Order:
    fields = dict(
        order_id=repository.next_order_id(),
        variant=ServiceVariant("passport-renewal", Money(10000), eta_days=7, name="Express"),
        quantity=2,
        delivery_type=DeliveryType.HOME,
        customer=CustomerInfo(name="Mona Adel", phone="01000000000", email="mona@example.com"),
        created_at=NOW,
        updated_at=NOW,
        delivery_fee=Money(5000),
        fines=(Fine("Late", Money(500)), Fine("محضر فقد", Money(10000), is_lost_report=True)),
        total_amount=Money(36500),
        remaining_amount=Money(36500),
    )
    fields.update(overrides)
    return Order(**fields)


def test_order_numbers_are_sequential() -> None:
    repository = DjangoOrderRepository()
    assert repository.next_order_id() == "000001"
    assert repository.next_order_id() == "000002"


def test_save_and_load_round_trip() -> None:
    repository = DjangoOrderRepository()
    repository.add_promo_code(make_promo())
    order = make_order(
        repository,
        promo_code=make_promo(),
        discount_amount=Money(2000),
        review_notes=("check receipt",),
        recorded_promo_ids=("promo-db-1",),
    )

    saved = repository.save_order(order)

    assert saved.version == 1
    assert saved == replace(order, version=1)
    assert saved.fines[1].is_lost_report
    assert saved.promo_code.code == "RAMADAN"
    assert saved.promo_usage_recorded
    assert saved.customer.email == "mona@example.com"
    assert repository.load_order(order.order_id) == saved


def test_load_unknown_order() -> None:
    with pytest.raises(OrderNotFoundError):
        DjangoOrderRepository().load_order("404404")


def test_stale_version_is_rejected() -> None:
    repository = DjangoOrderRepository()
    saved = repository.save_order(make_order(repository))
    repository.save_order(replace(saved, status=OrderStatus.IN_PROGRESS))

    with pytest.raises(ConcurrentModificationError):
        repository.save_order(replace(saved, status=OrderStatus.CANCELLED))

    assert repository.load_order(saved.order_id).status == OrderStatus.IN_PROGRESS


def test_duplicate_create_is_rejected() -> None:
    repository = DjangoOrderRepository()
    order = make_order(repository)
    repository.save_order(order)
    with pytest.raises(ConcurrentModificationError):
        repository.save_order(order)


def test_list_orders_filters_by_status_and_age() -> None:
    repository = DjangoOrderRepository()
    old = repository.save_order(make_order(repository, created_at=NOW - timedelta(hours=1)))
    repository.save_order(make_order(repository))
    repository.save_order(
        make_order(repository, created_at=NOW - timedelta(hours=2), status=OrderStatus.CANCELLED)
    )

    found = repository.list_orders(status=OrderStatus.PENDING, created_before=NOW)

    assert [order.order_id for order in found] == [old.order_id]
    assert len(repository.list_orders()) == 3


def test_promo_usage_compare_and_swap() -> None:
    repository = DjangoOrderRepository()
    repository.add_promo_code(make_promo(usage_limit=2))

    assert repository.record_promo_usage("promo-db-1", 0) is True
    assert repository.record_promo_usage("promo-db-1", 0) is False
    assert repository.record_promo_usage("promo-db-1", 1) is True
    # limit reached
    assert repository.record_promo_usage("promo-db-1", 2) is False
    assert PromoCodeRecord.objects.get(promo_id="promo-db-1").current_usage == 2


def test_promo_round_trip() -> None:
    repository = DjangoOrderRepository()
    promo = make_promo(usage_limit=None, max_discount=None, start_date=None, end_date=None)
    repository.add_promo_code(promo)
    assert repository.load_promo_code("RAMADAN") == promo
    assert repository.get_promo_by_id("promo-db-1") == promo
    assert repository.load_promo_code("MISSING") is None


def test_service_flow_against_the_database() -> None:
    sink = RecordingSink()
    service = build_order_service(
        config_store=InMemoryConfigStore(PricingRules()),
        event_sink=sink,
        clock=FixedClock(NOW),
    )
    DjangoOrderRepository().add_promo_code(make_promo())

    order = service.create_order(
        ServiceVariant("national-id", Money(30000), eta_days=3),
        1,
        DeliveryType.OFFICE,
        CustomerInfo(name="Sara", phone="01222222222"),
    )
    order = service.apply_promo_code(order, "RAMADAN", NOW).unwrap()
    assert order.discount_amount == Money(2000)
    assert order.total_amount == Money(28000)

    outcome = service.record_payment(order, Money(28000))
    assert outcome.is_accepted
    assert outcome.warnings == ()
    assert outcome.value.remaining_amount == Money(0)
    assert PromoCodeRecord.objects.get(promo_id="promo-db-1").current_usage == 1
    assert OrderRecord.objects.get(order_id=order.order_id).recorded_promo_ids == ["promo-db-1"]

    order = service.change_status(outcome.value, OrderStatus.IN_PROGRESS).unwrap()
    order = service.change_status(order, OrderStatus.COMPLETED).unwrap()
    record = OrderRecord.objects.get(order_id=order.order_id)
    assert record.status == "COMPLETED"
    assert record.completed_at == NOW
    assert record.version == 5
    assert len(sink.events) == 5
