"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from clinic.domain.exceptions import ValidationError

# Largest value an SQLite INTEGER column can hold
MAX_INTEGER = 2**63 - 1


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Money:
    """Monetary amount in the smallest currency unit (whole dong).

    VND has no minor unit in practice, so amounts are plain integers and
    every fractional intermediate result goes through ``round_half_up``.
    """

    amount: int
    currency: str = "VND"

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an integer, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.amount > MAX_INTEGER:
            raise ValidationError(f"Money amount is too large, got {self.amount}")

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def percent(self, rate: Decimal | int) -> Money:
        """Return ``rate`` percent of this amount, rounded half-up."""
        return Money(round_half_up(Decimal(self.amount) * Decimal(rate) / 100), self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:,}đ"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(0)

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that accepts "300000", 300000 or 300000.0.

        Fractional input is rejected rather than silently rounded.
        """
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return Money(int(value))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot sell zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_INTEGER:
            raise ValidationError(f"Quantity is too large, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


_RANGE_PATTERN = re.compile(
    r"([-+]?\d+(?:\.\d*)?)\s*(?:đến|to|-)\s*([-+]?\d+(?:\.\d*)?)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PrescriptionRange:
    """Inclusive dioptre interval parsed from a product's SPH/CYL label.

    Labels look like ``"-20.00 đến +20.00"`` or ``"-8.00 to +8.00"``.
    Bounds are normalised so ``low <= high`` regardless of how the label
    was written (``"0.00 đến -8.00"`` is a valid CYL label).
    """

    low: Decimal
    high: Decimal

    @property
    def width(self) -> Decimal:
        return self.high - self.low

    def contains(self, value: Decimal) -> bool:
        return self.low <= value <= self.high

    @staticmethod
    def parse(label: str | None) -> PrescriptionRange | None:
        """Return the range described by *label*, or None if it has none."""
        if not label:
            return None
        match = _RANGE_PATTERN.search(label)
        if match is None:
            return None
        first, second = Decimal(match.group(1)), Decimal(match.group(2))
        return PrescriptionRange(low=min(first, second), high=max(first, second))
