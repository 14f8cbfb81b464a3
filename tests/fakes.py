"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repository
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

from collections.abc import Iterable

from travel_oms.domain.exceptions import DuplicateOrderIdError, EntityNotFoundError
from travel_oms.domain.model.order import Order
from travel_oms.domain.repository.order_repository import OrderRepository


class FakeOrderRepository(OrderRepository):
    """Dict-backed store.

    ``collisions`` makes the first N ``persist`` calls report a duplicate
    id regardless of what is stored, to drive the id retry path.
    """

    def __init__(self, collisions: int = 0) -> None:
        self._store: dict[str, Order] = {}
        self._collisions_left = collisions
        self.persist_attempts: list[str] = []

    def persist(self, order: Order) -> None:
        self.persist_attempts.append(order.id)
        if self._collisions_left > 0:
            self._collisions_left -= 1
            raise DuplicateOrderIdError(order.id)
        if order.id in self._store:
            raise DuplicateOrderIdError(order.id)
        self._store[order.id] = order

    def update(self, order: Order) -> None:
        if order.id not in self._store:
            raise EntityNotFoundError(f"Order #{order.id} not found")
        self._store[order.id] = order

    def get_by_id(self, order_id: str) -> Order | None:
        return self._store.get(order_id)


class AlwaysCollidingOrderRepository(FakeOrderRepository):
    """Every persist reports a duplicate id."""

    def persist(self, order: Order) -> None:
        self.persist_attempts.append(order.id)
        raise DuplicateOrderIdError(order.id)


def scripted_ids(ids: Iterable[str]):
    """Id source handing out ``ids`` in order."""
    return iter(ids).__next__
