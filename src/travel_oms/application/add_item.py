"""Application service: Add Item use cases.

Turns caller input (strings, as they arrive from the CLI) into domain
items and hands them to the Order aggregate, which decides whether the
item may be added.
"""

from __future__ import annotations

import uuid

import structlog

from travel_oms.application.dto import (
    AncillaryItemSpec,
    FlightItemSpec,
    OrderItemDTO,
    item_to_dto,
)
from travel_oms.domain.exceptions import EntityNotFoundError, InvalidItemError
from travel_oms.domain.model.items import AncillaryType, OrderItem
from travel_oms.domain.model.order import Order
from travel_oms.domain.model.value_objects import Money
from travel_oms.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class _AddItemHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def _add(self, order_id: str, item: OrderItem) -> OrderItemDTO:
        order = self._load(order_id)
        order.add_item(item)
        self._order_repo.update(order)

        logger.info(
            "Item added",
            order_id=order.id,
            item_id=str(item.id),
            kind="flight" if item.is_flight else "ancillary",
            price=str(item.price),
        )
        return item_to_dto(item)

    def _load(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order


class AddFlightHandler(_AddItemHandler):

    def handle(self, order_id: str, spec: FlightItemSpec) -> OrderItemDTO:
        item = OrderItem.flight(
            price=Money.of(spec.price, spec.currency),
            origin=spec.origin,
            destination=spec.destination,
            flight_number=spec.flight_number,
            departure_time=spec.departure_time,
            arrival_time=spec.arrival_time,
        )
        return self._add(order_id, item)


class AddAncillaryHandler(_AddItemHandler):

    def handle(self, order_id: str, spec: AncillaryItemSpec) -> OrderItemDTO:
        item = OrderItem.ancillary(
            price=Money.of(spec.price, spec.currency),
            name=spec.name,
            type=_parse_type(spec.type),
            linked_flight_item_id=_parse_item_id(spec.linked_flight_item_id),
        )
        return self._add(order_id, item)


def _parse_type(raw: str) -> AncillaryType:
    try:
        return AncillaryType[raw.strip().upper().replace("-", "_")]
    except (KeyError, AttributeError) as exc:
        choices = ", ".join(t.name for t in AncillaryType)
        raise InvalidItemError(
            f"Unknown ancillary type {raw!r} (expected one of: {choices})"
        ) from exc


def _parse_item_id(raw: str | None) -> uuid.UUID | None:
    if raw is None or not raw.strip():
        return None
    try:
        return uuid.UUID(raw.strip())
    except ValueError as exc:
        raise InvalidItemError(f"Invalid flight item ID: {raw!r}") from exc
