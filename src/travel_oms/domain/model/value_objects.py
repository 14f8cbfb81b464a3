"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, InvalidOperation

from travel_oms.domain.exceptions import CurrencyMismatchError, InvalidAmountError

_CENTS = Decimal("0.01")

# Amounts may carry at most this many integer digits.
MAX_AMOUNT_DIGITS = 1000


def _context_for(*values: Decimal) -> Context:
    """Decimal context wide enough to hold any sum or product of ``values``
    exactly, so results never lose digits to the default 28-digit precision.
    """
    digits = sum(max(value.adjusted(), 0) + 3 for value in values)
    return Context(
        prec=max(digits, 28), rounding=ROUND_HALF_UP, Emax=MAX_EMAX, Emin=MIN_EMIN
    )


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  The amount is normalised to
    two fractional digits (ROUND_HALF_UP) on construction, so ``100``,
    ``100.0`` and ``100.00`` all compare and hash equal.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if self.amount is None:
            raise InvalidAmountError("Money amount is required")
        if not isinstance(self.amount, Decimal):
            raise InvalidAmountError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise InvalidAmountError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise InvalidAmountError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if not self.amount.is_zero() and self.amount.adjusted() >= MAX_AMOUNT_DIGITS:
            raise InvalidAmountError(
                f"Money amount out of range: more than {MAX_AMOUNT_DIGITS} integer digits"
            )
        if not isinstance(self.currency, str) or not self.currency.strip():
            raise InvalidAmountError("Money currency is required")

        currency = self.currency.strip().upper()
        if len(currency) != 3 or not (currency.isascii() and currency.isalpha()):
            raise InvalidAmountError(
                f"Currency must be a 3-letter ISO code, got {self.currency!r}"
            )

        try:
            amount = self.amount.quantize(
                _CENTS, rounding=ROUND_HALF_UP, context=_context_for(self.amount)
            )
        except InvalidOperation as exc:
            raise InvalidAmountError(f"Money amount out of range: {self.amount}") from exc
        if amount.is_zero():
            amount = amount.copy_abs()  # "-0" becomes "0.00"

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", currency)

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if amount is None:
            raise InvalidAmountError("Money amount is required")
        if isinstance(amount, bool):
            raise InvalidAmountError(f"Invalid money amount: {amount!r}")
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmountError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str) -> Money:
        return Money(Decimal("0"), currency)

    # --- Domain operations ----------------------------------------------------

    def add(self, other: Money) -> Money:
        self._assert_same_currency(other)
        ctx = _context_for(self.amount, other.amount)
        return Money(ctx.add(self.amount, other.amount), self.currency)

    def subtract(self, other: Money) -> Money:
        """Return ``self - other``; a negative result is rejected."""
        self._assert_same_currency(other)
        result = _context_for(self.amount, other.amount).subtract(self.amount, other.amount)
        if result < Decimal("0"):
            raise InvalidAmountError(
                f"Money subtraction would result in a negative amount ({self} - {other})"
            )
        return Money(result, self.currency)

    def multiply(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        if factor < 0:
            raise InvalidAmountError(f"Cannot multiply Money by a negative factor ({factor})")
        multiplier = Decimal(factor)
        ctx = _context_for(self.amount, multiplier)
        return Money(ctx.multiply(self.amount, multiplier), self.currency)

    def is_greater_than(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    # --- Operator forms -------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        return self.subtract(other)

    def __mul__(self, factor: int) -> Money:
        return self.multiply(factor)

    __rmul__ = __mul__

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.is_greater_than(other)

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot combine {self.currency} with {other.currency}"
            )
