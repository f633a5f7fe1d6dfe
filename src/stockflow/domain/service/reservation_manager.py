"""Domain service: Reservation Manager.

Reservations are soft holds: they raise ``reserved`` on a stock row without
moving physical quantity, so the units stay visible as "in stock" while no
other order can claim them.  They never write a ledger movement.

The manager works inside a unit of work opened by the caller; multi-line
reservations are therefore all-or-nothing.  The caller validates line
input first (phase 1); every guarded write runs in phase 2 and a refusal
rolls back the whole unit.
"""

from __future__ import annotations

import logging

from stockflow.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidStateError,
    Shortfall,
)
from stockflow.domain.model.inventory import StockLevel, StockOutcome, StockUpdate
from stockflow.domain.model.value_objects import Quantity
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ReservationManager:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def reserve(self, product_id: int, warehouse_id: int | None, amount: int) -> StockLevel:
        """Hold *amount* units; raises InsufficientStockError if not available."""
        qty = Quantity(amount).value
        update = self._uow.stock_for(warehouse_id).reserve(product_id, warehouse_id, qty)
        self._raise_if_missing(update, product_id, warehouse_id)
        if update.outcome is StockOutcome.REFUSED:
            available = update.level.available if update.level else 0
            raise InsufficientStockError(
                [Shortfall(product_id, self._product_name(product_id), qty, available)]
            )
        return update.current

    def release(self, product_id: int, warehouse_id: int | None, amount: int) -> StockLevel:
        """Drop a hold of *amount* units; raises InvalidStateError if over-releasing."""
        qty = Quantity(amount).value
        update = self._uow.stock_for(warehouse_id).release(product_id, warehouse_id, qty)
        self._raise_if_missing(update, product_id, warehouse_id)
        if update.outcome is StockOutcome.REFUSED:
            reserved = update.level.reserved if update.level else 0
            raise InvalidStateError(
                f"Cannot release {qty} of {self._product_name(product_id)} "
                f"- only {reserved} currently reserved"
            )
        return update.current

    def reserve_lines(
        self, quantities: dict[int, int], warehouse_id: int | None
    ) -> list[StockLevel]:
        """Reserve several products at once.

        Phase 1 reads every row and collects all shortfalls so the caller
        sees the full list.  Phase 2 runs the guarded writes; a refusal there
        means a concurrent writer won and the caller's unit rolls back.
        """
        store = self._uow.stock_for(warehouse_id)

        shortfalls: list[Shortfall] = []
        for product_id, qty in quantities.items():
            Quantity(qty)
            level = store.get_level(product_id, warehouse_id)
            available = level.available if level else 0
            if qty > available:
                shortfalls.append(
                    Shortfall(product_id, self._product_name(product_id), qty, available)
                )
        if shortfalls:
            raise InsufficientStockError(shortfalls)

        return [
            self.reserve(product_id, warehouse_id, qty)
            for product_id, qty in quantities.items()
        ]

    def release_lines(
        self, quantities: dict[int, int], warehouse_id: int | None
    ) -> list[StockLevel]:
        return [
            self.release(product_id, warehouse_id, qty)
            for product_id, qty in quantities.items()
        ]

    # --- Internal helpers -----------------------------------------------------

    def _product_name(self, product_id: int) -> str:
        product = self._uow.products.get_by_id(product_id)
        return product.name if product else f"product #{product_id}"

    @staticmethod
    def _raise_if_missing(
        update: StockUpdate, product_id: int, warehouse_id: int | None
    ) -> None:
        if update.outcome is StockOutcome.MISSING:
            where = "globally" if warehouse_id is None else f"in warehouse #{warehouse_id}"
            raise EntityNotFoundError(
                f"No stock record for product #{product_id} {where}"
            )
