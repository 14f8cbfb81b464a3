"""Application service: Create Order use case.

Builds a new, empty order for a customer and persists it through the
id allocation service, which retries with a fresh id on collisions.
The returned DTO carries the id that was actually stored.
"""

from __future__ import annotations

import structlog

from travel_oms.application.dto import OrderDTO, order_to_dto
from travel_oms.domain.model.order import IdSource, Order, generate_order_id
from travel_oms.domain.service.order_id_service import OrderIdAllocationService

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        id_service: OrderIdAllocationService,
        id_source: IdSource = generate_order_id,
    ) -> None:
        self._id_service = id_service
        self._id_source = id_source

    def handle(self, customer_id: str, customer_email: str) -> OrderDTO:
        order = Order.create(
            customer_id=customer_id,
            customer_email=customer_email,
            id_source=self._id_source,
        )
        saved = self._id_service.save(order)

        logger.info("Order created", order_id=saved.id, customer_id=saved.customer_id)
        return order_to_dto(saved)
