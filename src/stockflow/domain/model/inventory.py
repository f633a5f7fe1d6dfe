"""Stock levels and the outcome values returned by inventory store primitives.

A stock level exists either as the global counter on a product
(``warehouse_id is None``) or as a per-(product, warehouse) record.  Both
shapes are read and written through the same ``StockStore`` contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class StockLevel:
    """Snapshot of one stock row.

    Invariants (enforced by the store, checked here for snapshots built
    by hand):
    - ``0 <= reserved <= quantity``
    - ``available`` is always >= 0
    """

    product_id: int
    warehouse_id: int | None
    quantity: int
    reserved: int = 0

    def __post_init__(self) -> None:
        if self.quantity < 0 or self.reserved < 0 or self.reserved > self.quantity:
            raise ValueError(
                f"Inconsistent stock level: quantity={self.quantity}, "
                f"reserved={self.reserved}"
            )

    @property
    def available(self) -> int:
        return self.quantity - self.reserved

    @property
    def is_global(self) -> bool:
        return self.warehouse_id is None


class StockOutcome(Enum):
    APPLIED = "APPLIED"
    # the guard predicate was false when the statement ran
    CONFLICT = "CONFLICT"
    # the request itself breaks an invariant on the current row
    REFUSED = "REFUSED"
    MISSING = "MISSING"


@dataclass(frozen=True)
class StockUpdate:
    """Result of a conditional store primitive.

    ``level`` is the row as observed right after the attempt (``None`` when
    the row does not exist).  ``delta`` is the signed change actually applied
    to ``quantity``.
    """

    outcome: StockOutcome
    level: StockLevel | None = None
    delta: int = 0

    @property
    def applied(self) -> bool:
        return self.outcome is StockOutcome.APPLIED

    @property
    def current(self) -> StockLevel:
        """The observed level, for outcomes where the row is known to exist."""
        if self.level is None:
            raise LookupError(f"No stock row observed ({self.outcome.value})")
        return self.level
