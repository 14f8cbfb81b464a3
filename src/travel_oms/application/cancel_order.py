"""Application service: Cancel Order use case.

Cancelling an order cascades to every item that is not cancelled yet.
CANCELLED is terminal: a cancelled order accepts no further changes.
"""

from __future__ import annotations

import structlog

from travel_oms.application.dto import OrderDTO, order_to_dto
from travel_oms.domain.exceptions import EntityNotFoundError
from travel_oms.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.cancel()
        self._order_repo.update(order)

        logger.info("Order cancelled", order_id=order.id, items=len(order.items))
        return order_to_dto(order)
