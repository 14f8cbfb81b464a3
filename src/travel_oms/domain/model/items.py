"""Order items: flight segments and ancillary products.

An ``OrderItem`` is a single record (id, status, price) carrying a
variant payload in ``details``: either a ``FlightSegment`` or an
``Ancillary``.  The payloads are frozen; the item's status is the only
thing that ever changes after construction, and only through
``transition_status``.

Multi-leg trips (LHR -> CDG -> JFK) are one flight item per segment in
the same order.  Bags, meals and Wi-Fi are just more items in the same
cart with the same payment lifecycle.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Union

from travel_oms.domain.exceptions import InvalidItemError
from travel_oms.domain.model.status import ItemStatus, validate_item_transition
from travel_oms.domain.model.value_objects import Money


class AncillaryType(Enum):
    """Catalogue discriminator for ancillary products.

    New products (LOUNGE_ACCESS, PRIORITY_BOARDING ...) are added here.
    """

    BAGGAGE = "BAGGAGE"
    MEAL = "MEAL"
    WIFI = "WIFI"
    SEAT_UPGRADE = "SEAT_UPGRADE"
    TRAVEL_INSURANCE = "TRAVEL_INSURANCE"


# ---------------------------------------------------------------------------
# Variant payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FlightSegment:
    """One flight leg.

    Immutable: if a flight changes, cancel the item and add a new one.
    ``arrival_time`` is optional because it is not always known upfront.
    """

    origin: str
    destination: str
    flight_number: str
    departure_time: datetime
    arrival_time: datetime | None = None

    def __post_init__(self) -> None:
        origin = _airport_code("origin", self.origin)
        destination = _airport_code("destination", self.destination)
        if origin == destination:
            raise InvalidItemError("Origin and destination cannot be the same airport")

        if not isinstance(self.flight_number, str) or not self.flight_number.strip():
            raise InvalidItemError("Flight number must not be blank")

        _timestamp("departure_time", self.departure_time)
        if self.arrival_time is not None:
            _timestamp("arrival_time", self.arrival_time)
            if self.arrival_time <= self.departure_time:
                raise InvalidItemError("Arrival time must be after departure time")

        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "destination", destination)
        object.__setattr__(self, "flight_number", self.flight_number.strip())

    @property
    def duration(self) -> timedelta | None:
        if self.arrival_time is None:
            return None
        return self.arrival_time - self.departure_time

    def __str__(self) -> str:
        return f"{self.flight_number} {self.origin}->{self.destination}"


@dataclass(frozen=True)
class Ancillary:
    """A non-transport product sold alongside the flights.

    ``linked_flight_item_id`` is None for order-level products (trip-wide
    Wi-Fi, insurance) and set for per-segment products (a meal on one leg).
    """

    name: str
    type: AncillaryType
    linked_flight_item_id: uuid.UUID | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidItemError("Ancillary name must not be blank")
        if not isinstance(self.type, AncillaryType):
            raise InvalidItemError(f"Ancillary type must be an AncillaryType, got {self.type!r}")
        if self.linked_flight_item_id is not None and not isinstance(
            self.linked_flight_item_id, uuid.UUID
        ):
            raise InvalidItemError(
                f"Linked flight item id must be a UUID, got {self.linked_flight_item_id!r}"
            )
        object.__setattr__(self, "name", self.name.strip())

    @property
    def is_linked_to_flight(self) -> bool:
        return self.linked_flight_item_id is not None

    def __str__(self) -> str:
        return self.name


ItemDetails = Union[FlightSegment, Ancillary]


# ---------------------------------------------------------------------------
# Order item
# ---------------------------------------------------------------------------


class OrderItem:
    """A purchasable line inside an Order.

    Equality is entity equality: two items are equal only if they carry
    the same variant and the same id.  Contents are never compared.

    Use the ``OrderItem.flight()`` / ``OrderItem.ancillary()`` factories;
    the constructor does the shared checks only.
    """

    __slots__ = ("_id", "_status", "_price", "_details")

    def __init__(
        self,
        item_id: uuid.UUID,
        price: Money,
        details: ItemDetails,
        status: ItemStatus = ItemStatus.ACTIVE,
    ) -> None:
        if not isinstance(item_id, uuid.UUID):
            raise InvalidItemError(f"Item id must be a UUID, got {item_id!r}")
        if price is None:
            raise InvalidItemError("Item price is required")
        if not isinstance(price, Money):
            raise InvalidItemError(f"Item price must be Money, got {type(price).__name__}")
        if not isinstance(details, (FlightSegment, Ancillary)):
            raise InvalidItemError(f"Unknown item details: {type(details).__name__}")
        if not isinstance(status, ItemStatus):
            raise InvalidItemError(f"Item status must be an ItemStatus, got {status!r}")

        self._id = item_id
        self._price = price
        self._details = details
        self._status = status

    # --- Factories ------------------------------------------------------------

    @classmethod
    def flight(
        cls,
        *,
        price: Money,
        origin: str,
        destination: str,
        flight_number: str,
        departure_time: datetime,
        arrival_time: datetime | None = None,
        item_id: uuid.UUID | None = None,
        status: ItemStatus = ItemStatus.ACTIVE,
    ) -> OrderItem:
        segment = FlightSegment(
            origin=origin,
            destination=destination,
            flight_number=flight_number,
            departure_time=departure_time,
            arrival_time=arrival_time,
        )
        return cls(item_id or uuid.uuid4(), price, segment, status)

    @classmethod
    def ancillary(
        cls,
        *,
        price: Money,
        name: str,
        type: AncillaryType,
        linked_flight_item_id: uuid.UUID | None = None,
        item_id: uuid.UUID | None = None,
        status: ItemStatus = ItemStatus.ACTIVE,
    ) -> OrderItem:
        extra = Ancillary(name=name, type=type, linked_flight_item_id=linked_flight_item_id)
        return cls(item_id or uuid.uuid4(), price, extra, status)

    # --- Accessors ------------------------------------------------------------

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def status(self) -> ItemStatus:
        return self._status

    @property
    def price(self) -> Money:
        return self._price

    @property
    def details(self) -> ItemDetails:
        return self._details

    @property
    def is_active(self) -> bool:
        return self._status is ItemStatus.ACTIVE

    @property
    def is_flight(self) -> bool:
        return isinstance(self._details, FlightSegment)

    @property
    def is_ancillary(self) -> bool:
        return isinstance(self._details, Ancillary)

    # --- Behaviour ------------------------------------------------------------

    def transition_status(self, new_status: ItemStatus) -> None:
        """Move to ``new_status`` if the item status machine allows it."""
        validate_item_transition(self._id, self._status, new_status)
        self._status = new_status

    # --- Entity contract ------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, OrderItem):
            return NotImplemented
        return type(self._details) is type(other._details) and self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self._details).__name__, self._id))

    def __repr__(self) -> str:
        kind = "flight" if self.is_flight else "ancillary"
        return (
            f"OrderItem({kind}, id={self._id}, status={self._status.value}, "
            f"price={self._price}, details={self._details})"
        )


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _airport_code(field_name: str, value: str) -> str:
    code = value.strip() if isinstance(value, str) else ""
    if len(code) != 3 or not (code.isascii() and code.isalpha()):
        raise InvalidItemError(f"{field_name} must be a 3-letter IATA code, got {value!r}")
    return code.upper()


def _timestamp(field_name: str, value: datetime) -> None:
    if value is None:
        raise InvalidItemError(f"{field_name} is required")
    if not isinstance(value, datetime):
        raise InvalidItemError(f"{field_name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidItemError(f"{field_name} must be timezone-aware")
