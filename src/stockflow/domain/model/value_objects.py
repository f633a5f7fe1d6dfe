"""Prices and unit counts.

Both are immutable and validate on construction, so a handler never sees a
negative price or a zero-unit order line.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from stockflow.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "EUR"
CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """A non-negative amount rounded half-up to cents.

    Sale prices, unit costs on the ledger and order totals all use it; the
    database columns hold two decimal places, so rounding happens here and
    not on the way in.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")
        object.__setattr__(self, "amount", self.amount.quantize(CENT, rounding=ROUND_HALF_UP))

    @classmethod
    def of(cls, raw: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Parse user or CLI input such as ``"19.90"``."""
        try:
            amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid money amount: {raw!r}") from exc
        return cls(amount, currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal(0), currency)

    @classmethod
    def sum(cls, amounts: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        result = cls.zero(currency)
        for amount in amounts:
            result = result + amount
        return result

    def times(self, units: int) -> Money:
        """Line total for *units* at this unit price."""
        return Money(self.amount * units, self.currency)

    def __add__(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


@dataclass(frozen=True)
class Quantity:
    """Units ordered, reserved, received or moved; always a positive int."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not count as one unit
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
