"""Abstract repository for the stock ledger.

The ledger is append-only: there is deliberately no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.repository.page import Page


@dataclass(frozen=True)
class MovementFilter:
    product_id: int | None = None
    warehouse_id: int | None = None
    kind: MovementKind | None = None
    reference_type: ReferenceType | None = None
    reference_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


class MovementRepository(ABC):

    @abstractmethod
    def append(self, movement: StockMovement) -> StockMovement:
        """Insert a movement and return it with its assigned ID."""

    @abstractmethod
    def list(
        self,
        criteria: MovementFilter | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[StockMovement]:
        """Return movements matching *criteria*, newest first."""

    @abstractmethod
    def count_by_kind(self) -> dict[MovementKind, int]:
        """Return the number of movements per kind (missing kinds are 0)."""

    @abstractmethod
    def net_change(self, product_id: int, warehouse_id: int | None) -> int:
        """Sum of signed deltas recorded for one stock row."""
