"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its items: flight segments and
ancillaries bought together under one payment lifecycle.  Every change to
an item goes through the Order, and every business invariant is enforced
here.

Order ids are 8 Crockford Base32 symbols (about 1.1 trillion values):
short, human-readable and phone-friendly.  Uniqueness is enforced at
persistence time, see ``OrderIdAllocationService``.
"""

from __future__ import annotations

import random
import secrets
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from travel_oms.domain.exceptions import (
    InvalidItemError,
    ItemNotFoundError,
    MixedCurrenciesError,
    NoActiveItemsError,
    OrderCancelledError,
    ValidationError,
)
from travel_oms.domain.model.items import Ancillary, FlightSegment, OrderItem
from travel_oms.domain.model.status import ItemStatus, OrderStatus, validate_order_transition
from travel_oms.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Order id generation
# ---------------------------------------------------------------------------
# Crockford alphabet: no I, L, O or U, so ids survive being read aloud.
ORDER_ID_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ORDER_ID_LENGTH = 8

DEFAULT_CURRENCY = "USD"

IdSource = Callable[[], str]

_system_random = secrets.SystemRandom()


def generate_order_id(rng: random.Random = _system_random) -> str:
    return "".join(rng.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_LENGTH))


def is_valid_order_id(value: str) -> bool:
    return (
        isinstance(value, str)
        and len(value) == ORDER_ID_LENGTH
        and all(ch in ORDER_ID_ALPHABET for ch in value)
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order:
    """Aggregate root for travel purchases.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    def __init__(
        self,
        id: str,
        customer_id: str,
        customer_email: str,
        status: OrderStatus = OrderStatus.CREATED,
        items: list[OrderItem] | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        self.id = id
        self.customer_id = customer_id
        self.customer_email = customer_email
        self._status = status
        self._items: list[OrderItem] = list(items or [])
        self.created_at = created_at or _utcnow()
        self.updated_at = updated_at or self.created_at

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: str,
        customer_email: str,
        order_id: str | None = None,
        id_source: IdSource = generate_order_id,
    ) -> Order:
        """Create a new, empty order in CREATED status.

        Normally the id is drawn from ``id_source``.  An explicit
        ``order_id`` is only passed when re-identifying an order after an
        id collision.
        """
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer ID is required")
        if not customer_email or not customer_email.strip():
            raise ValidationError("Customer email is required")

        if order_id is None:
            order_id = id_source()
        if not is_valid_order_id(order_id):
            raise ValidationError(
                f"Order ID must be {ORDER_ID_LENGTH} characters from "
                f"{ORDER_ID_ALPHABET}, got {order_id!r}"
            )

        return Order(
            id=order_id,
            customer_id=customer_id.strip(),
            customer_email=customer_email.strip(),
        )

    def with_order_id(self, order_id: str) -> Order:
        """Return a copy of this order under a different id.

        Items (same ids, same statuses), status and ``created_at`` are
        carried over.  Each item is copied, so the two orders never share
        an item.  Used when the original id collided in storage.
        """
        rebuilt = Order.create(self.customer_id, self.customer_email, order_id=order_id)
        rebuilt._status = self._status
        rebuilt._items = [
            OrderItem(item.id, item.price, item.details, item.status)
            for item in self._items
        ]
        rebuilt.created_at = self.created_at
        rebuilt.updated_at = self.updated_at
        return rebuilt

    # --- Accessors ------------------------------------------------------------

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def items(self) -> tuple[OrderItem, ...]:
        """Read-only view; use ``add_item`` / ``cancel_item`` to change it."""
        return tuple(self._items)

    # --- Item management ------------------------------------------------------

    def add_item(self, item: OrderItem) -> None:
        self._assert_not_cancelled()
        if item is None:
            raise InvalidItemError("Cannot add a null item")
        if not isinstance(item, OrderItem):
            raise InvalidItemError(f"Expected an OrderItem, got {type(item).__name__}")

        details = item.details
        if isinstance(details, Ancillary) and details.is_linked_to_flight:
            if not any(
                f.id == details.linked_flight_item_id for f in self.flight_items()
            ):
                raise InvalidItemError(
                    f"Ancillary '{details.name}' is linked to flight item "
                    f"{details.linked_flight_item_id}, which is not in order [{self.id}]"
                )

        self._items.append(item)
        self._touch()

    def cancel_item(self, item_id: uuid.UUID) -> None:
        """Cancel a single item.  The order keeps its current status."""
        self.find_item(item_id).transition_status(ItemStatus.CANCELLED)
        self._touch()

    # --- State transitions ----------------------------------------------------

    def initiate_payment(self) -> None:
        """Transition CREATED -> PENDING_PAYMENT.

        Refused when nothing in the order is still active.
        """
        self._assert_not_cancelled()
        if not self.active_items():
            raise NoActiveItemsError(
                f"Cannot initiate payment on order [{self.id}]: no active items"
            )
        self._transition(OrderStatus.PENDING_PAYMENT)

    def confirm(self) -> None:
        """Transition PENDING_PAYMENT -> CONFIRMED."""
        self._transition(OrderStatus.CONFIRMED)

    def cancel(self) -> None:
        """Cancel the order and every item that is not cancelled yet."""
        self._assert_not_cancelled()
        validate_order_transition(self.id, self._status, OrderStatus.CANCELLED)
        for item in self._items:
            if item.status is not ItemStatus.CANCELLED:
                item.transition_status(ItemStatus.CANCELLED)
        self._status = OrderStatus.CANCELLED
        self._touch()

    # --- Computed views -------------------------------------------------------

    def calculate_total(self) -> Money:
        """Sum of active item prices, recomputed on every call."""
        active = self.active_items()
        if not active:
            return Money.zero(DEFAULT_CURRENCY)

        currencies = {item.price.currency for item in active}
        if len(currencies) > 1:
            raise MixedCurrenciesError(
                f"Mixed currencies in order [{self.id}]: {', '.join(sorted(currencies))}"
            )

        total = Money.zero(active[0].price.currency)
        for item in active:
            total = total + item.price
        return total

    def active_items(self) -> list[OrderItem]:
        return [item for item in self._items if item.is_active]

    def flight_items(self) -> list[OrderItem]:
        return [item for item in self._items if isinstance(item.details, FlightSegment)]

    def ancillary_items(self) -> list[OrderItem]:
        return [item for item in self._items if isinstance(item.details, Ancillary)]

    def ancillaries_for(self, flight_item_id: uuid.UUID) -> list[OrderItem]:
        """Segment-level ancillaries attached to one flight item."""
        return [
            item
            for item in self.ancillary_items()
            if item.details.linked_flight_item_id == flight_item_id
        ]

    def find_item(self, item_id: uuid.UUID) -> OrderItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(f"No item [{item_id}] in order [{self.id}]")

    # --- Internal helpers -----------------------------------------------------

    def _transition(self, target: OrderStatus) -> None:
        validate_order_transition(self.id, self._status, target)
        self._status = target
        self._touch()

    def _assert_not_cancelled(self) -> None:
        if self._status is OrderStatus.CANCELLED:
            raise OrderCancelledError(
                f"Order [{self.id}] is CANCELLED. No further operations allowed."
            )

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id!r}, customer_id={self.customer_id!r}, "
            f"status={self._status.value}, items={len(self._items)})"
        )
