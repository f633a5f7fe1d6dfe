"""Inventory store contract.

One interface, two backing shapes: the global counter on the product row
(``warehouse_id is None``) and the per-(product, warehouse) record.  Every
write is a single predicate-guarded statement; business outcomes come back
as ``StockUpdate`` values, never as exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.inventory import StockLevel, StockUpdate


class StockStore(ABC):

    @abstractmethod
    def get_level(self, product_id: int, warehouse_id: int | None) -> StockLevel | None:
        """Plain row read; None when no row exists."""

    @abstractmethod
    def list_levels(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevel]:
        """Return stock rows, optionally narrowed to a product or warehouse."""

    @abstractmethod
    def conditional_decrement(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        """Decrement only if ``quantity - reserved >= amount`` at write time.

        CONFLICT when the guard fails, MISSING when there is no row.
        """

    @abstractmethod
    def increment(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        """Add *amount* units, creating the row when it does not exist."""

    @abstractmethod
    def adjust_absolute(
        self, product_id: int, warehouse_id: int | None, new_quantity: int
    ) -> StockUpdate:
        """Set the quantity to *new_quantity* (physical count).

        REFUSED when ``new_quantity < reserved``; CONFLICT when the row changed
        between the read and the guarded write; MISSING when there is no row.
        """

    @abstractmethod
    def reserve(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        """Increase ``reserved`` only if ``amount <= available``; else REFUSED."""

    @abstractmethod
    def release(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        """Decrease ``reserved`` only if ``amount <= reserved``; else REFUSED."""

    @abstractmethod
    def remove(self, product_id: int, warehouse_id: int | None) -> StockUpdate:
        """Delete the row; REFUSED while units are reserved."""
