"""Tests for the order id acquisition retry loop."""

from datetime import datetime, timezone

import pytest
from structlog.testing import capture_logs

from travel_oms.domain.exceptions import IdSpaceExhaustedError
from travel_oms.domain.model.items import OrderItem
from travel_oms.domain.model.order import Order
from travel_oms.domain.model.value_objects import Money
from travel_oms.domain.service.order_id_service import (
    MAX_ID_ATTEMPTS,
    OrderIdAllocationService,
)
from tests.fakes import AlwaysCollidingOrderRepository, FakeOrderRepository, scripted_ids


def _order(order_id: str = "AAAA1111") -> Order:
    return Order.create("CUST-1", "cust@example.com", order_id=order_id)


def _flight() -> OrderItem:
    return OrderItem.flight(
        price=Money.of("479.00", "USD"),
        origin="JFK",
        destination="LHR",
        flight_number="BA177",
        departure_time=datetime(2026, 7, 22, 16, 0, tzinfo=timezone.utc),
    )


class TestSaveWithoutCollision:

    def test_returns_same_order(self):
        repo = FakeOrderRepository()
        service = OrderIdAllocationService(repo)
        order = _order()

        saved = service.save(order)

        assert saved is order
        assert repo.persist_attempts == ["AAAA1111"]
        assert repo.get_by_id("AAAA1111") is order


class TestSaveWithCollisions:

    def test_third_attempt_wins(self):
        repo = FakeOrderRepository(collisions=2)
        service = OrderIdAllocationService(repo, id_source=scripted_ids(["BBBB2222", "CCCC3333"]))

        saved = service.save(_order())

        assert saved.id == "CCCC3333"
        assert saved.id != "AAAA1111"
        assert repo.persist_attempts == ["AAAA1111", "BBBB2222", "CCCC3333"]
        assert repo.get_by_id("CCCC3333") is saved
        assert repo.get_by_id("AAAA1111") is None

    def test_customer_and_items_carried_over(self):
        repo = FakeOrderRepository(collisions=1)
        service = OrderIdAllocationService(repo, id_source=scripted_ids(["BBBB2222"]))
        order = _order()
        flight = _flight()
        order.add_item(flight)

        saved = service.save(order)

        assert saved.customer_id == "CUST-1"
        assert saved.customer_email == "cust@example.com"
        assert saved.items == (flight,)
        assert saved.created_at == order.created_at

    def test_each_collision_is_logged(self):
        repo = FakeOrderRepository(collisions=2)
        service = OrderIdAllocationService(repo, id_source=scripted_ids(["BBBB2222", "CCCC3333"]))

        with capture_logs() as logs:
            service.save(_order())

        collisions = [e for e in logs if e["event"] == "Order ID collision"]
        assert [(e["order_id"], e["attempt"]) for e in collisions] == [
            ("AAAA1111", 1),
            ("BBBB2222", 2),
        ]
        assert all(e["log_level"] == "warning" for e in collisions)


class TestIdSpaceExhausted:

    def test_gives_up_after_five_attempts(self):
        repo = AlwaysCollidingOrderRepository()
        ids = scripted_ids(["BBBB2222", "CCCC3333", "DDDD4444", "EEEE5555", "FFFF6666"])
        service = OrderIdAllocationService(repo, id_source=ids)

        with pytest.raises(IdSpaceExhaustedError, match="after 5 attempts"):
            service.save(_order())

        assert MAX_ID_ATTEMPTS == 5
        assert repo.persist_attempts == [
            "AAAA1111", "BBBB2222", "CCCC3333", "DDDD4444", "EEEE5555"
        ]

    def test_exhaustion_logged_as_error(self):
        service = OrderIdAllocationService(
            AlwaysCollidingOrderRepository(),
            id_source=scripted_ids(["BBBB2222", "CCCC3333"]),
            max_attempts=2,
        )
        with capture_logs() as logs:
            with pytest.raises(IdSpaceExhaustedError):
                service.save(_order())

        assert logs[-1]["event"] == "Order ID space exhausted"
        assert logs[-1]["log_level"] == "error"

    def test_attempt_budget_must_be_positive(self):
        with pytest.raises(ValueError):
            OrderIdAllocationService(FakeOrderRepository(), max_attempts=0)
