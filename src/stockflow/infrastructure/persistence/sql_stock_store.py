"""SQL implementations of the inventory store.

Every write is one ``UPDATE ... WHERE <guard>`` statement.  The database
serialises writers on the row, so two callers racing for the last unit
cannot both see the guard hold: exactly one update matches a row, the other
matches none and gets a CONFLICT/REFUSED outcome instead of driving the
quantity negative.  Reads select columns (not entities) so they never come
from a stale identity map.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from sqlalchemy import ColumnElement, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockflow.domain.model.inventory import StockLevel, StockOutcome, StockUpdate
from stockflow.domain.repository.stock_store import StockStore
from stockflow.infrastructure.persistence.tables import InventoryRow, ProductRow

logger = logging.getLogger(__name__)


class _GuardedCounterStore(StockStore):
    """Shared guarded statements over a (quantity, reserved) column pair."""

    table: type

    def __init__(self, session: Session) -> None:
        self._session = session

    @abstractmethod
    def _quantity_col(self):
        """The mapped on-hand quantity column."""

    @abstractmethod
    def _reserved_col(self):
        """The mapped reserved quantity column."""

    @abstractmethod
    def _key(self, product_id: int, warehouse_id: int | None) -> ColumnElement[bool]:
        """WHERE clause selecting exactly one stock row."""

    @abstractmethod
    def _level_query(self):
        """SELECT of the row labelled ``quantity`` and ``reserved``."""

    # --- Reads ----------------------------------------------------------------

    def get_level(self, product_id: int, warehouse_id: int | None) -> StockLevel | None:
        row = self._session.execute(
            self._level_query().where(self._key(product_id, warehouse_id))
        ).one_or_none()
        if row is None:
            return None
        return StockLevel(
            product_id=product_id,
            warehouse_id=warehouse_id,
            quantity=row.quantity,
            reserved=row.reserved,
        )

    # --- Guarded writes -------------------------------------------------------

    def conditional_decrement(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        quantity, reserved = self._quantity_col(), self._reserved_col()
        matched = self._update(
            product_id,
            warehouse_id,
            guard=(quantity - reserved) >= amount,
            values={quantity.key: quantity - amount},
        )
        update_ = self._result(matched, product_id, warehouse_id, StockOutcome.CONFLICT)
        if update_.applied:
            return StockUpdate(update_.outcome, update_.level, delta=-amount)
        logger.debug(
            "Guarded decrement of %d refused for product #%s (warehouse %s)",
            amount, product_id, warehouse_id,
        )
        return update_

    def adjust_absolute(
        self, product_id: int, warehouse_id: int | None, new_quantity: int
    ) -> StockUpdate:
        current = self.get_level(product_id, warehouse_id)
        if current is None:
            return StockUpdate(StockOutcome.MISSING)
        if new_quantity < current.reserved:
            return StockUpdate(StockOutcome.REFUSED, current)

        quantity, reserved = self._quantity_col(), self._reserved_col()
        # optimistic: only applies if nobody moved the row since our read
        matched = self._update(
            product_id,
            warehouse_id,
            guard=(quantity == current.quantity) & (reserved <= new_quantity),
            values={quantity.key: new_quantity},
        )
        update_ = self._result(matched, product_id, warehouse_id, StockOutcome.CONFLICT)
        if update_.applied:
            return StockUpdate(update_.outcome, update_.level, delta=new_quantity - current.quantity)
        return update_

    def reserve(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        quantity, reserved = self._quantity_col(), self._reserved_col()
        matched = self._update(
            product_id,
            warehouse_id,
            guard=(quantity - reserved) >= amount,
            values={reserved.key: reserved + amount},
        )
        return self._result(matched, product_id, warehouse_id, StockOutcome.REFUSED)

    def release(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        reserved = self._reserved_col()
        matched = self._update(
            product_id,
            warehouse_id,
            guard=reserved >= amount,
            values={reserved.key: reserved - amount},
        )
        return self._result(matched, product_id, warehouse_id, StockOutcome.REFUSED)

    # --- Internal helpers -----------------------------------------------------

    def _update(
        self,
        product_id: int,
        warehouse_id: int | None,
        guard: ColumnElement[bool] | None,
        values: dict,
    ) -> bool:
        stmt = update(self.table).where(self._key(product_id, warehouse_id))
        if guard is not None:
            stmt = stmt.where(guard)
        result = self._session.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _result(
        self,
        matched: bool,
        product_id: int,
        warehouse_id: int | None,
        failure: StockOutcome,
    ) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if matched:
            return StockUpdate(StockOutcome.APPLIED, level)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        return StockUpdate(failure, level)


class SqlGlobalStockStore(_GuardedCounterStore):
    """Global counter on the product row (warehouse-less mode)."""

    table = ProductRow

    def _quantity_col(self):
        return ProductRow.global_quantity

    def _reserved_col(self):
        return ProductRow.global_reserved

    def _key(self, product_id: int, warehouse_id: int | None) -> ColumnElement[bool]:
        if warehouse_id is not None:
            raise ValueError("Global stock store called with a warehouse")
        return ProductRow.id == product_id

    def _level_query(self):
        return select(
            ProductRow.global_quantity.label("quantity"),
            ProductRow.global_reserved.label("reserved"),
        )

    def list_levels(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevel]:
        if warehouse_id is not None:
            return []
        stmt = select(
            ProductRow.id, ProductRow.global_quantity, ProductRow.global_reserved
        ).order_by(ProductRow.id)
        if product_id is not None:
            stmt = stmt.where(ProductRow.id == product_id)
        return [
            StockLevel(product_id=pid, warehouse_id=None, quantity=qty, reserved=res)
            for pid, qty, res in self._session.execute(stmt)
        ]

    def increment(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        matched = self._update(
            product_id,
            warehouse_id,
            guard=None,
            values={"global_quantity": ProductRow.global_quantity + amount},
        )
        update_ = self._result(matched, product_id, warehouse_id, StockOutcome.MISSING)
        return StockUpdate(update_.outcome, update_.level, delta=amount if matched else 0)

    def remove(self, product_id: int, warehouse_id: int | None) -> StockUpdate:
        # the global counter lives on the product row and cannot be dropped
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        return StockUpdate(StockOutcome.REFUSED, level)


class SqlWarehouseStockStore(_GuardedCounterStore):
    """Per-(product, warehouse) inventory records."""

    table = InventoryRow

    def _quantity_col(self):
        return InventoryRow.quantity

    def _reserved_col(self):
        return InventoryRow.quantity_reserved

    def _key(self, product_id: int, warehouse_id: int | None) -> ColumnElement[bool]:
        if warehouse_id is None:
            raise ValueError("Warehouse stock store called without a warehouse")
        return (InventoryRow.product_id == product_id) & (
            InventoryRow.warehouse_id == warehouse_id
        )

    def _level_query(self):
        return select(
            InventoryRow.quantity.label("quantity"),
            InventoryRow.quantity_reserved.label("reserved"),
        )

    def list_levels(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevel]:
        stmt = select(
            InventoryRow.product_id,
            InventoryRow.warehouse_id,
            InventoryRow.quantity,
            InventoryRow.quantity_reserved,
        ).order_by(InventoryRow.warehouse_id, InventoryRow.product_id)
        if product_id is not None:
            stmt = stmt.where(InventoryRow.product_id == product_id)
        if warehouse_id is not None:
            stmt = stmt.where(InventoryRow.warehouse_id == warehouse_id)
        return [
            StockLevel(product_id=pid, warehouse_id=wid, quantity=qty, reserved=res)
            for pid, wid, qty, res in self._session.execute(stmt)
        ]

    def increment(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        values = {"quantity": InventoryRow.quantity + amount}
        matched = self._update(product_id, warehouse_id, guard=None, values=values)
        if not matched:
            # first stock for this pair: create the record lazily
            try:
                with self._session.begin_nested():
                    self._session.execute(
                        insert(InventoryRow).values(
                            product_id=product_id,
                            warehouse_id=warehouse_id,
                            quantity=amount,
                            quantity_reserved=0,
                        )
                    )
                matched = True
            except IntegrityError:
                # a concurrent writer created it first
                matched = self._update(product_id, warehouse_id, guard=None, values=values)
        update_ = self._result(matched, product_id, warehouse_id, StockOutcome.MISSING)
        return StockUpdate(update_.outcome, update_.level, delta=amount if matched else 0)

    def remove(self, product_id: int, warehouse_id: int | None) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        result = self._session.execute(
            delete(InventoryRow)
            .where(self._key(product_id, warehouse_id))
            .where(InventoryRow.quantity_reserved == 0)
            .where(InventoryRow.quantity == level.quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = self.get_level(product_id, warehouse_id)
            if current is None:
                return StockUpdate(StockOutcome.MISSING)
            if current.reserved > 0:
                return StockUpdate(StockOutcome.REFUSED, current)
            return StockUpdate(StockOutcome.CONFLICT, current)
        return StockUpdate(StockOutcome.APPLIED, level, delta=-level.quantity)
