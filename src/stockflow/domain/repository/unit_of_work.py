"""Unit of Work: one atomic transaction spanning every repository.

Leaving the ``with`` block without calling ``commit()`` rolls back, so an
exception anywhere in a handler undoes every write made through the unit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.repository.movement_repository import MovementRepository
from stockflow.domain.repository.order_repository import OrderRepository
from stockflow.domain.repository.product_repository import (
    ProductRepository,
    WarehouseRepository,
)
from stockflow.domain.repository.stock_store import StockStore


class UnitOfWork(ABC):
    products: ProductRepository
    warehouses: WarehouseRepository
    orders: OrderRepository
    movements: MovementRepository
    global_stock: StockStore
    warehouse_stock: StockStore

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    def stock_for(self, warehouse_id: int | None) -> StockStore:
        """Pick the backing store: global counter or per-warehouse record."""
        if warehouse_id is None:
            return self.global_stock
        return self.warehouse_stock

    @abstractmethod
    def commit(self) -> None:
        """Make every write since ``__enter__`` durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes (no-op after commit)."""
