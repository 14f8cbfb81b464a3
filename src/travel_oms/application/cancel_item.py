"""Application service: Cancel Item use case.

Cancels one item; the order keeps its status.  The order total drops by
the item's price because totals only count active items.
"""

from __future__ import annotations

import uuid

import structlog

from travel_oms.application.dto import OrderDTO, order_to_dto
from travel_oms.domain.exceptions import EntityNotFoundError, ItemNotFoundError
from travel_oms.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class CancelItemHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, item_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        try:
            parsed = uuid.UUID(item_id)
        except ValueError as exc:
            raise ItemNotFoundError(f"No item [{item_id}] in order [{order_id}]") from exc

        order.cancel_item(parsed)
        self._order_repo.update(order)

        logger.info("Item cancelled", order_id=order.id, item_id=str(parsed))
        return order_to_dto(order)
