"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from travel_oms.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def persist(self, order: Order) -> None:
        """Insert a NEW order.

        Raises DuplicateOrderIdError if ``order.id`` is already taken.
        """

    @abstractmethod
    def update(self, order: Order) -> None:
        """Replace an already persisted order.

        Raises EntityNotFoundError if no order with ``order.id`` exists.
        """

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""
