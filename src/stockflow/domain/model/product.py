"""Product and Warehouse as seen by the stock core.

Both are owned by catalog management; the stock core only reads their
metadata.  Quantities are deliberately absent here: they belong to the
inventory store and are never written through these objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockflow.domain.model.value_objects import Money


@dataclass
class Product:
    """Catalog metadata needed to fulfil orders and evaluate thresholds."""

    id: int | None
    sku: str
    name: str
    sale_price: Money
    unit_cost: Money
    min_threshold: int = 0
    max_threshold: int | None = None
    active: bool = True

    def is_low(self, quantity: int) -> bool:
        return quantity <= self.min_threshold

    def reorder_quantity(self, quantity: int) -> int:
        """Units needed to bring *quantity* back to the max threshold.

        Falls back to twice the min threshold when no max is configured.
        """
        target = self.max_threshold or self.min_threshold * 2
        return max(0, target - quantity)


@dataclass
class Warehouse:
    id: int | None
    name: str
    code: str
    active: bool = True
    capacity: int | None = None
