"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from travel_oms.domain.exceptions import DuplicateOrderIdError, EntityNotFoundError
from travel_oms.domain.model.items import (
    Ancillary,
    AncillaryType,
    FlightSegment,
    OrderItem,
)
from travel_oms.domain.model.order import Order
from travel_oms.domain.model.status import ItemStatus, OrderStatus
from travel_oms.domain.model.value_objects import Money
from travel_oms.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def persist(self, order: Order) -> None:
        orders = self._load_raw()
        if any(raw["id"] == order.id for raw in orders):
            raise DuplicateOrderIdError(order.id)
        orders.append(self._to_raw(order))
        self._persist_raw(orders)

    def update(self, order: Order) -> None:
        orders = self._load_raw()
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                self._persist_raw(orders)
                return
        raise EntityNotFoundError(f"Order #{order.id} not found")

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "customer_email": order.customer_email,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [JsonOrderRepository._item_to_raw(item) for item in order.items],
        }

    @staticmethod
    def _item_to_raw(item: OrderItem) -> dict:
        raw = {
            "id": str(item.id),
            "status": item.status.value,
            "price": str(item.price.amount),
            "currency": item.price.currency,
        }
        details = item.details
        if isinstance(details, FlightSegment):
            raw["kind"] = "flight"
            raw["origin"] = details.origin
            raw["destination"] = details.destination
            raw["flight_number"] = details.flight_number
            raw["departure_time"] = details.departure_time.isoformat()
            raw["arrival_time"] = (
                details.arrival_time.isoformat() if details.arrival_time else None
            )
        else:
            raw["kind"] = "ancillary"
            raw["name"] = details.name
            raw["type"] = details.type.value
            raw["linked_flight_item_id"] = (
                str(details.linked_flight_item_id)
                if details.linked_flight_item_id
                else None
            )
        return raw

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            customer_id=raw["customer_id"],
            customer_email=raw["customer_email"],
            status=OrderStatus(raw["status"]),
            items=[JsonOrderRepository._item_to_domain(i) for i in raw["items"]],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    @staticmethod
    def _item_to_domain(raw: dict) -> OrderItem:
        if raw["kind"] == "flight":
            details = FlightSegment(
                origin=raw["origin"],
                destination=raw["destination"],
                flight_number=raw["flight_number"],
                departure_time=datetime.fromisoformat(raw["departure_time"]),
                arrival_time=(
                    datetime.fromisoformat(raw["arrival_time"])
                    if raw.get("arrival_time")
                    else None
                ),
            )
        else:
            linked = raw.get("linked_flight_item_id")
            details = Ancillary(
                name=raw["name"],
                type=AncillaryType(raw["type"]),
                linked_flight_item_id=uuid.UUID(linked) if linked else None,
            )
        return OrderItem(
            item_id=uuid.UUID(raw["id"]),
            price=Money(Decimal(raw["price"]), raw["currency"]),
            details=details,
            status=ItemStatus(raw["status"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
