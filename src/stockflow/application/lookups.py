"""Lookups shared by the use cases: resolve IDs or fail with NotFound.

Handlers that add, move or hold stock require an active product; releasing
holds, cancelling orders and removing records also accept inactive ones.
"""

from __future__ import annotations

from stockflow.domain.exceptions import EntityNotFoundError, InvalidStateError
from stockflow.domain.model.product import Product, Warehouse
from stockflow.domain.repository.unit_of_work import UnitOfWork


def require_product(uow: UnitOfWork, product_id: int) -> Product:
    product = uow.products.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundError(f"Product #{product_id} not found")
    return product


def require_active_product(uow: UnitOfWork, product_id: int) -> Product:
    product = require_product(uow, product_id)
    if not product.active:
        raise InvalidStateError(f"Product '{product.name}' is inactive")
    return product


def require_warehouse(uow: UnitOfWork, warehouse_id: int) -> Warehouse:
    """Return an active warehouse; inactive ones cannot move stock."""
    warehouse = uow.warehouses.get_by_id(warehouse_id)
    if warehouse is None:
        raise EntityNotFoundError(f"Warehouse #{warehouse_id} not found")
    if not warehouse.active:
        raise InvalidStateError(f"Warehouse '{warehouse.code}' is inactive")
    return warehouse


def require_scope(uow: UnitOfWork, warehouse_id: int | None) -> None:
    """Validate the warehouse when one is given; global mode needs nothing."""
    if warehouse_id is not None:
        require_warehouse(uow, warehouse_id)
