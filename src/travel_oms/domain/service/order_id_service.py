"""Domain service: unique order id acquisition.

Order ids are short random strings, so two orders can draw the same one.
The storage layer owns the uniqueness guarantee and signals a clash with
``DuplicateOrderIdError``.  This service turns that signal into a bounded
retry: draw a fresh id, re-identify the order, persist again.

The caller gets back the order that was actually stored.  Its id is the
authoritative one, even if it differs from the id the caller started with.
"""

from __future__ import annotations

import structlog

from travel_oms.domain.exceptions import DuplicateOrderIdError, IdSpaceExhaustedError
from travel_oms.domain.model.order import IdSource, Order, generate_order_id
from travel_oms.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

MAX_ID_ATTEMPTS = 5


class OrderIdAllocationService:

    def __init__(
        self,
        order_repo: OrderRepository,
        id_source: IdSource = generate_order_id,
        max_attempts: int = MAX_ID_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._order_repo = order_repo
        self._id_source = id_source
        self._max_attempts = max_attempts

    def save(self, order: Order) -> Order:
        """Persist a new order, re-identifying it on id collisions.

        Items, status and timestamps travel with the order onto its new id.
        Raises IdSpaceExhaustedError once ``max_attempts`` persists have
        all collided.
        """
        candidate = order
        for attempt in range(1, self._max_attempts + 1):
            try:
                self._order_repo.persist(candidate)
            except DuplicateOrderIdError as exc:
                logger.warning(
                    "Order ID collision",
                    order_id=exc.order_id,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                )
                if attempt == self._max_attempts:
                    break
                candidate = candidate.with_order_id(self._id_source())
                continue

            if candidate.id != order.id:
                logger.info(
                    "Order persisted under a new ID",
                    requested_id=order.id,
                    order_id=candidate.id,
                    attempts=attempt,
                )
            return candidate

        logger.error(
            "Order ID space exhausted",
            customer_id=order.customer_id,
            attempts=self._max_attempts,
        )
        raise IdSpaceExhaustedError(
            f"Could not acquire a unique order ID after {self._max_attempts} attempts; "
            f"check the random source or the order ID space"
        )
