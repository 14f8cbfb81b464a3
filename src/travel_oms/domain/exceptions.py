"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


# --- Money --------------------------------------------------------------------


class InvalidAmountError(ValidationError):
    """A monetary amount or currency code is missing, malformed or negative."""


class CurrencyMismatchError(ValidationError):
    """Arithmetic or comparison attempted across two currencies."""


# --- Items & order ------------------------------------------------------------


class InvalidItemError(ValidationError):
    """An order item failed construction-time validation."""


class IllegalStatusTransitionError(ValidationError):
    """A status machine rejected a transition."""

    def __init__(self, entity_id: Any, current: Any, requested: Any) -> None:
        self.entity_id = entity_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invalid status transition for [{entity_id}]: "
            f"{_name(current)} -> {_name(requested)}"
        )


class OrderCancelledError(ValidationError):
    """Mutation attempted on an order that is already cancelled."""


class NoActiveItemsError(ValidationError):
    """Payment initiated on an order without any active item."""


class MixedCurrenciesError(ValidationError):
    """Active items of one order are priced in more than one currency."""


class ItemNotFoundError(EntityNotFoundError):
    """No item with the requested id exists in the order."""


# --- Persistence --------------------------------------------------------------


class DuplicateOrderIdError(DomainException):
    """Raised by storage when an order id is already taken."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Duplicate order ID: {order_id}")


class IdSpaceExhaustedError(DomainException):
    """No unique order id could be acquired within the retry budget.

    Not retryable: points at a broken random source or a crowded id space.
    """


def _name(status: Any) -> str:
    return getattr(status, "value", str(status))
