"""SQLAlchemy-backed catalog repositories."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockflow.domain.model.product import Product, Warehouse
from stockflow.domain.model.value_objects import Money
from stockflow.domain.repository.product_repository import (
    ProductRepository,
    WarehouseRepository,
)
from stockflow.infrastructure.persistence.tables import ProductRow, WarehouseRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row else None

    def get_by_sku(self, sku: str) -> Product | None:
        row = self._session.scalar(select(ProductRow).where(ProductRow.sku == sku))
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Product]:
        rows = self._session.scalars(select(ProductRow).order_by(ProductRow.id))
        return [self._to_domain(row) for row in rows]

    def add(self, product: Product) -> Product:
        row = ProductRow(
            sku=product.sku,
            name=product.name,
            sale_price=product.sale_price.amount,
            unit_cost=product.unit_cost.amount,
            min_threshold=product.min_threshold,
            max_threshold=product.max_threshold,
            active=product.active,
            global_quantity=0,
            global_reserved=0,
        )
        self._session.add(row)
        self._session.flush()
        product.id = row.id
        return product

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            sku=row.sku,
            name=row.name,
            sale_price=Money(Decimal(row.sale_price)),
            unit_cost=Money(Decimal(row.unit_cost)),
            min_threshold=row.min_threshold,
            max_threshold=row.max_threshold,
            active=row.active,
        )


class SqlWarehouseRepository(WarehouseRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, warehouse_id: int) -> Warehouse | None:
        row = self._session.get(WarehouseRow, warehouse_id)
        return self._to_domain(row) if row else None

    def get_by_code(self, code: str) -> Warehouse | None:
        row = self._session.scalar(select(WarehouseRow).where(WarehouseRow.code == code))
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Warehouse]:
        rows = self._session.scalars(select(WarehouseRow).order_by(WarehouseRow.id))
        return [self._to_domain(row) for row in rows]

    def add(self, warehouse: Warehouse) -> Warehouse:
        row = WarehouseRow(
            code=warehouse.code,
            name=warehouse.name,
            active=warehouse.active,
            capacity=warehouse.capacity,
        )
        self._session.add(row)
        self._session.flush()
        warehouse.id = row.id
        return warehouse

    @staticmethod
    def _to_domain(row: WarehouseRow) -> Warehouse:
        return Warehouse(
            id=row.id,
            name=row.name,
            code=row.code,
            active=row.active,
            capacity=row.capacity,
        )
