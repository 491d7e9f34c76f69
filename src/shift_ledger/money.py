"""Fixed-point money in integer cents."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from functools import total_ordering
from typing import Iterable, Union

Number = Union[int, float, Decimal]

CENTS_PER_UNIT = 100


def to_decimal(value: Number) -> Decimal:
    """Convert a factor to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def truncate_cents(value: Decimal) -> int:
    """Truncate a Decimal cent amount toward zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_DOWN))


@total_ordering
@dataclass(frozen=True)
class Money:
    """A monetary amount held as an integer number of cents.

    Arithmetic with non-integer factors goes through Decimal and truncates
    toward zero to the whole cent:

    - ``Money(2550) * 0.5`` -> ``Money(1275)``
    - ``Money(1000) / 3`` -> ``Money(333)``
    """

    cents: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise TypeError(f"Money cents must be int, got {type(self.cents).__name__}")

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def from_euros(cls, euros: Number) -> Money:
        """Build from major units, truncating sub-cent fractions."""
        return cls(truncate_cents(to_decimal(euros) * CENTS_PER_UNIT))

    @property
    def euros(self) -> Decimal:
        return Decimal(self.cents) / CENTS_PER_UNIT

    def multiply(self, factor: Number) -> Money:
        return Money(truncate_cents(Decimal(self.cents) * to_decimal(factor)))

    def divide(self, divisor: Number) -> Money:
        """Divide, returning zero when the divisor is zero."""
        d = to_decimal(divisor)
        if d == 0:
            return Money(0)
        return Money(truncate_cents(Decimal(self.cents) / d))

    def prorate(self, numerator: Number, denominator: Number) -> Money:
        """Return ``self * numerator / denominator`` without intermediate rounding."""
        d = to_decimal(denominator)
        if d == 0:
            return Money(0)
        return Money(truncate_cents(Decimal(self.cents) * to_decimal(numerator) / d))

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents + other.cents)

    def __radd__(self, other: object) -> Money:
        # Lets the builtin sum() start from 0
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents - other.cents)

    def __neg__(self) -> Money:
        return Money(-self.cents)

    def __mul__(self, factor: Number) -> Money:
        if isinstance(factor, Money):
            return NotImplemented
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number) -> Money:
        if isinstance(divisor, Money):
            return NotImplemented
        return self.divide(divisor)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents < other.cents

    def __bool__(self) -> bool:
        return self.cents != 0

    def __int__(self) -> int:
        return self.cents

    def __str__(self) -> str:
        sign = "-" if self.cents < 0 else ""
        whole, frac = divmod(abs(self.cents), CENTS_PER_UNIT)
        return f"EUR {sign}{whole}.{frac:02d}"


def sum_money(amounts: Iterable[Money]) -> Money:
    """Sum Money values, starting from zero."""
    total = Money(0)
    for amount in amounts:
        total = total + amount
    return total


def min_money(a: Money, b: Money) -> Money:
    return a if a <= b else b


def max_money(a: Money, b: Money) -> Money:
    return a if a >= b else b
