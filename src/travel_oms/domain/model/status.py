"""Status machines for order items and orders.

Both machines are plain transition tables.  ``can_transition_to`` is a pure
lookup; the ``validate_*`` helpers turn an illegal move into an
``IllegalStatusTransitionError`` naming the entity and both states.

Item lifecycle::

    ACTIVE ──► MODIFICATION_PENDING ──► ACTIVE  (loop)
      │               │
      ▼               ▼
    CANCELLED      CANCELLED

Order lifecycle::

    CREATED ──► PENDING_PAYMENT ──► CONFIRMED
       │              │                 │
       ▼              ▼                 ▼
    CANCELLED      CANCELLED        CANCELLED
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from travel_oms.domain.exceptions import IllegalStatusTransitionError


class ItemStatus(Enum):
    ACTIVE = "ACTIVE"
    MODIFICATION_PENDING = "MODIFICATION_PENDING"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, target: ItemStatus) -> bool:
        return target in _ITEM_TRANSITIONS[self]

    def allowed_transitions(self) -> list[ItemStatus]:
        return [s for s in ItemStatus if s in _ITEM_TRANSITIONS[self]]

    def is_terminal(self) -> bool:
        return not _ITEM_TRANSITIONS[self]


class OrderStatus(Enum):
    CREATED = "CREATED"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _ORDER_TRANSITIONS[self]

    def allowed_transitions(self) -> list[OrderStatus]:
        return [s for s in OrderStatus if s in _ORDER_TRANSITIONS[self]]

    def is_terminal(self) -> bool:
        return not _ORDER_TRANSITIONS[self]


_ITEM_TRANSITIONS: dict[ItemStatus, frozenset[ItemStatus]] = {
    ItemStatus.ACTIVE: frozenset({ItemStatus.MODIFICATION_PENDING, ItemStatus.CANCELLED}),
    ItemStatus.MODIFICATION_PENDING: frozenset({ItemStatus.ACTIVE, ItemStatus.CANCELLED}),
    ItemStatus.CANCELLED: frozenset(),
}

_ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.CREATED: frozenset({OrderStatus.PENDING_PAYMENT, OrderStatus.CANCELLED}),
    OrderStatus.PENDING_PAYMENT: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),
}


def validate_item_transition(entity_id: Any, current: ItemStatus, target: ItemStatus) -> None:
    """Raise IllegalStatusTransitionError unless ``current -> target`` is legal."""
    if not current.can_transition_to(target):
        raise IllegalStatusTransitionError(entity_id, current, target)


def validate_order_transition(entity_id: Any, current: OrderStatus, target: OrderStatus) -> None:
    """Raise IllegalStatusTransitionError unless ``current -> target`` is legal."""
    if not current.can_transition_to(target):
        raise IllegalStatusTransitionError(entity_id, current, target)
