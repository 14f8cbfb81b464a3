"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from travel_oms.domain.exceptions import MixedCurrenciesError
from travel_oms.domain.model.items import Ancillary, OrderItem
from travel_oms.domain.model.order import Order

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class FlightItemSpec:
    """Input: one flight segment the customer wants to buy."""

    origin: str
    destination: str
    flight_number: str
    departure_time: datetime
    price: str
    currency: str = "USD"
    arrival_time: datetime | None = None


@dataclass(frozen=True)
class AncillaryItemSpec:
    """Input: an ancillary product, optionally tied to one flight item."""

    name: str
    type: str  # AncillaryType name, e.g. "MEAL"
    price: str
    currency: str = "USD"
    linked_flight_item_id: str | None = None


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single item as displayed to the user."""

    id: str
    kind: str  # "flight" | "ancillary"
    status: str
    description: str
    price: str  # formatted, e.g. "549.99 USD"
    linked_flight_item_id: str | None = None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    customer_id: str
    customer_email: str
    status: str
    items: list[OrderItemDTO]
    total: str
    created_at: str
    updated_at: str


# --- Mapping ------------------------------------------------------------------


def item_to_dto(item: OrderItem) -> OrderItemDTO:
    details = item.details
    linked = None
    if isinstance(details, Ancillary):
        kind = "ancillary"
        description = f"{details.name} ({details.type.value})"
        if details.linked_flight_item_id is not None:
            linked = str(details.linked_flight_item_id)
    else:
        kind = "flight"
        description = f"{details.flight_number} {details.origin}->{details.destination} " + (
            details.departure_time.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)
        )
    return OrderItemDTO(
        id=str(item.id),
        kind=kind,
        status=item.status.value,
        description=description,
        price=str(item.price),
        linked_flight_item_id=linked,
    )


def order_to_dto(order: Order) -> OrderDTO:
    try:
        total = str(order.calculate_total())
    except MixedCurrenciesError:
        # totals across currencies are not supported; show that instead
        total = "n/a (mixed currencies)"

    return OrderDTO(
        id=order.id,
        customer_id=order.customer_id,
        customer_email=order.customer_email,
        status=order.status.value,
        items=[item_to_dto(item) for item in order.items],
        total=total,
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(_TIMESTAMP_FORMAT),
    )
