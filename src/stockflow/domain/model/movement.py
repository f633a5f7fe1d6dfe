"""StockMovement: the immutable ledger entry.

A movement records the intent and cause of a quantity change.  It is not
the source of truth for current quantities; the inventory store is, and the
orchestrators write both in the same transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockflow.domain.exceptions import ValidationError
from stockflow.domain.model.value_objects import Money


class MovementKind(Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUST = "ADJUST"
    TRANSFER = "TRANSFER"
    RETURN = "RETURN"


class ReferenceType(Enum):
    ORDER = "ORDER"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"
    RECEIPT = "RECEIPT"


# Kinds whose quantity is a magnitude; the kind gives the direction.
_POSITIVE = {MovementKind.IN, MovementKind.RETURN}
_NEGATIVE = {MovementKind.OUT}


@dataclass(frozen=True)
class StockMovement:
    """One append-only ledger row.

    ``quantity`` is a positive magnitude for IN, OUT and RETURN, and a signed
    non-zero delta for ADJUST and TRANSFER.
    """

    product_id: int
    warehouse_id: int | None
    kind: MovementKind
    quantity: int
    reason: str
    reference_type: ReferenceType | None = None
    reference_id: str | None = None
    unit_cost: Money | None = None
    actor_id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None

    def __post_init__(self) -> None:
        if self.kind in _POSITIVE or self.kind in _NEGATIVE:
            if self.quantity <= 0:
                raise ValidationError(
                    f"{self.kind.value} movement quantity must be positive"
                )
        elif self.quantity == 0:
            raise ValidationError(f"{self.kind.value} movement cannot be zero")

    @property
    def delta(self) -> int:
        """Signed effect of this movement on the stock quantity."""
        if self.kind in _NEGATIVE:
            return -self.quantity
        return self.quantity
