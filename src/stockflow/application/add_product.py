"""Application service: Add Product / Add Warehouse use cases.

The catalog is owned by another system; these exist to seed a standalone
installation.  Stock always starts at zero and arrives through receipts.
"""

from __future__ import annotations

from stockflow.domain.exceptions import ValidationError
from stockflow.domain.model.product import Product, Warehouse
from stockflow.domain.model.value_objects import Money
from stockflow.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        sku: str,
        name: str,
        sale_price: str,
        unit_cost: str = "0",
        min_threshold: int = 0,
        max_threshold: int | None = None,
    ) -> Product:
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if min_threshold < 0:
            raise ValidationError("Min threshold cannot be negative")
        if max_threshold is not None and max_threshold < min_threshold:
            raise ValidationError("Max threshold cannot be below min threshold")

        with self._uow as uow:
            if uow.products.get_by_sku(sku.strip()) is not None:
                raise ValidationError(f"Product with SKU '{sku}' already exists")
            product = uow.products.add(
                Product(
                    id=None,
                    sku=sku.strip(),
                    name=name.strip(),
                    sale_price=Money.of(sale_price),
                    unit_cost=Money.of(unit_cost),
                    min_threshold=min_threshold,
                    max_threshold=max_threshold,
                )
            )
            uow.commit()
        return product


class AddWarehouseHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, code: str, name: str, capacity: int | None = None) -> Warehouse:
        if not code or not code.strip():
            raise ValidationError("Warehouse code is required")
        if capacity is not None and capacity <= 0:
            raise ValidationError("Warehouse capacity must be positive")

        with self._uow as uow:
            if uow.warehouses.get_by_code(code.strip()) is not None:
                raise ValidationError(f"Warehouse '{code}' already exists")
            warehouse = uow.warehouses.add(
                Warehouse(id=None, name=name.strip() or code, code=code.strip(), capacity=capacity)
            )
            uow.commit()
        return warehouse
