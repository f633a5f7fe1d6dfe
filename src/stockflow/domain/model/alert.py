"""Low-stock alert payload handed to the notification collaborator."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class LowStockAlert:
    product_id: int
    product_name: str
    warehouse_id: int | None
    remaining_quantity: int
    min_threshold: int

    def to_dict(self) -> dict:
        return asdict(self)
