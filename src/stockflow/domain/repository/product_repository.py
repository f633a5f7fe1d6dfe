"""Abstract repositories for catalog data (products and warehouses).

The catalog is owned elsewhere; the stock core reads it and only adds
records when seeding a standalone installation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.product import Product, Warehouse


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return a product by its SKU, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Insert a new product and assign its ID."""


class WarehouseRepository(ABC):

    @abstractmethod
    def get_by_id(self, warehouse_id: int) -> Warehouse | None:
        """Return a warehouse by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Warehouse | None:
        """Return a warehouse by its code, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Warehouse]:
        """Return every warehouse."""

    @abstractmethod
    def add(self, warehouse: Warehouse) -> Warehouse:
        """Insert a new warehouse and assign its ID."""
