"""Application service: Confirm Order use case.

Confirms an order whose payment has been initiated
(PENDING_PAYMENT -> CONFIRMED).
"""

from __future__ import annotations

import structlog

from travel_oms.application.dto import OrderDTO, order_to_dto
from travel_oms.domain.exceptions import EntityNotFoundError
from travel_oms.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class ConfirmOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.confirm()
        self._order_repo.update(order)

        logger.info("Order confirmed", order_id=order.id)
        return order_to_dto(order)
