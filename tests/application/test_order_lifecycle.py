"""Integration tests for the pay / confirm / cancel / show use cases."""

from datetime import datetime, timezone

import pytest

from travel_oms.application.cancel_item import CancelItemHandler
from travel_oms.application.cancel_order import CancelOrderHandler
from travel_oms.application.confirm_order import ConfirmOrderHandler
from travel_oms.application.initiate_payment import InitiatePaymentHandler
from travel_oms.application.show_order import ShowOrderHandler
from travel_oms.domain.exceptions import (
    EntityNotFoundError,
    IllegalStatusTransitionError,
    ItemNotFoundError,
    MixedCurrenciesError,
    NoActiveItemsError,
    OrderCancelledError,
)
from travel_oms.domain.model.items import AncillaryType, OrderItem
from travel_oms.domain.model.order import Order
from travel_oms.domain.model.status import OrderStatus
from travel_oms.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository


def _setup(with_items: bool = True) -> tuple[FakeOrderRepository, Order, dict[str, OrderItem]]:
    repo = FakeOrderRepository()
    order = Order.create("CUST-98234", "jane.doe@email.com", order_id="AAAA1111")
    items: dict[str, OrderItem] = {}
    if with_items:
        items["flight"] = OrderItem.flight(
            price=Money.of("549.99", "USD"),
            origin="LHR",
            destination="JFK",
            flight_number="BA178",
            departure_time=datetime(2026, 7, 15, 11, 0, tzinfo=timezone.utc),
        )
        items["meal"] = OrderItem.ancillary(
            price=Money.of("28.50", "USD"),
            name="Vegetarian Meal",
            type=AncillaryType.MEAL,
            linked_flight_item_id=items["flight"].id,
        )
        for item in items.values():
            order.add_item(item)
    repo.persist(order)
    return repo, order, items


class TestCancelItem:

    def test_cancels_and_updates_total(self):
        repo, order, items = _setup()
        dto = CancelItemHandler(repo).handle("AAAA1111", str(items["meal"].id))
        assert dto.total == "549.99 USD"
        assert dto.status == "CREATED"
        assert [i.status for i in dto.items] == ["ACTIVE", "CANCELLED"]

    def test_unknown_item_rejected(self):
        repo, _, _ = _setup()
        with pytest.raises(ItemNotFoundError):
            CancelItemHandler(repo).handle("AAAA1111", "00000000-0000-4000-8000-000000000000")

    def test_malformed_item_id_rejected(self):
        repo, _, _ = _setup()
        with pytest.raises(ItemNotFoundError, match="No item"):
            CancelItemHandler(repo).handle("AAAA1111", "meal")

    def test_double_cancel_rejected(self):
        repo, _, items = _setup()
        handler = CancelItemHandler(repo)
        handler.handle("AAAA1111", str(items["meal"].id))
        with pytest.raises(IllegalStatusTransitionError):
            handler.handle("AAAA1111", str(items["meal"].id))


class TestPayAndConfirm:

    def test_full_lifecycle(self):
        repo, order, _ = _setup()

        paid = InitiatePaymentHandler(repo).handle("AAAA1111")
        assert paid.status == "PENDING_PAYMENT"
        assert paid.total == "578.49 USD"

        confirmed = ConfirmOrderHandler(repo).handle("AAAA1111")
        assert confirmed.status == "CONFIRMED"
        assert repo.get_by_id("AAAA1111").status is OrderStatus.CONFIRMED

    def test_pay_without_items_rejected(self):
        repo, order, _ = _setup(with_items=False)
        with pytest.raises(NoActiveItemsError):
            InitiatePaymentHandler(repo).handle("AAAA1111")
        assert order.status is OrderStatus.CREATED

    def test_confirm_before_pay_rejected(self):
        repo, _, _ = _setup()
        with pytest.raises(IllegalStatusTransitionError, match="CREATED -> CONFIRMED"):
            ConfirmOrderHandler(repo).handle("AAAA1111")

    def test_unknown_order_rejected(self):
        repo, _, _ = _setup()
        for handler in (InitiatePaymentHandler(repo), ConfirmOrderHandler(repo)):
            with pytest.raises(EntityNotFoundError, match="not found"):
                handler.handle("ZZZZ9999")


class TestCancelOrder:

    def test_cascades(self):
        repo, _, _ = _setup()
        dto = CancelOrderHandler(repo).handle("AAAA1111")
        assert dto.status == "CANCELLED"
        assert {i.status for i in dto.items} == {"CANCELLED"}
        assert dto.total == "0.00 USD"

    def test_second_cancel_rejected(self):
        repo, _, _ = _setup()
        handler = CancelOrderHandler(repo)
        handler.handle("AAAA1111")
        with pytest.raises(OrderCancelledError):
            handler.handle("AAAA1111")


class TestShowOrder:

    def test_shows_items_and_total(self):
        repo, _, items = _setup()
        dto = ShowOrderHandler(repo).handle("AAAA1111")
        assert dto.id == "AAAA1111"
        assert [i.kind for i in dto.items] == ["flight", "ancillary"]
        assert dto.items[1].linked_flight_item_id == str(items["flight"].id)
        assert dto.total == "578.49 USD"

    def test_mixed_currency_total_not_shown(self):
        repo, order, _ = _setup()
        order.add_item(
            OrderItem.ancillary(
                price=Money.of("12", "EUR"), name="Insurance", type=AncillaryType.TRAVEL_INSURANCE
            )
        )
        with pytest.raises(MixedCurrenciesError):
            order.calculate_total()
        assert ShowOrderHandler(repo).handle("AAAA1111").total == "n/a (mixed currencies)"

    def test_unknown_order_rejected(self):
        repo, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(repo).handle("ZZZZ9999")
