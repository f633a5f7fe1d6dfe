"""Application service: Show Inventory use cases (queries)."""

from __future__ import annotations

from dataclasses import dataclass

from stockflow.application.dto import StockLevelDTO, level_to_dto
from stockflow.application.lookups import require_product
from stockflow.domain.model.inventory import StockLevel
from stockflow.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class LowStockDTO:
    level: StockLevelDTO
    min_threshold: int
    reorder_quantity: int


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevelDTO]:
        """Stock rows, global counters first then per-warehouse records.

        Passing a warehouse restricts the listing to that warehouse.
        """
        with self._uow as uow:
            if product_id is not None:
                require_product(uow, product_id)
            levels = self._levels(uow, product_id, warehouse_id)
            names = {p.id: p.name for p in uow.products.list_all()}
        return [level_to_dto(level, names.get(level.product_id, "?")) for level in levels]

    def availability(self, product_id: int, warehouse_id: int | None = None) -> StockLevelDTO:
        """Quantity, reserved and available for one stock row (zeros if absent)."""
        with self._uow as uow:
            product = require_product(uow, product_id)
            level = uow.stock_for(warehouse_id).get_level(product_id, warehouse_id)
        if level is None:
            level = StockLevel(product_id=product_id, warehouse_id=warehouse_id, quantity=0)
        return level_to_dto(level, product.name)

    def low_stock(self, warehouse_id: int | None = None) -> list[LowStockDTO]:
        """Rows at or below their product's min threshold, largest reorder first."""
        with self._uow as uow:
            products = {p.id: p for p in uow.products.list_all() if p.active}
            levels = self._levels(uow, None, warehouse_id)

        result = [
            LowStockDTO(
                level=level_to_dto(level, products[level.product_id].name),
                min_threshold=products[level.product_id].min_threshold,
                reorder_quantity=products[level.product_id].reorder_quantity(level.quantity),
            )
            for level in levels
            if level.product_id in products
            and products[level.product_id].is_low(level.quantity)
        ]
        return sorted(result, key=lambda r: r.reorder_quantity, reverse=True)

    def out_of_stock(self, warehouse_id: int | None = None) -> list[StockLevelDTO]:
        return [dto for dto in self.handle(warehouse_id=warehouse_id) if dto.quantity == 0]

    @staticmethod
    def _levels(
        uow: UnitOfWork, product_id: int | None, warehouse_id: int | None
    ) -> list[StockLevel]:
        if warehouse_id is not None:
            return uow.warehouse_stock.list_levels(product_id=product_id, warehouse_id=warehouse_id)
        return uow.global_stock.list_levels(product_id=product_id) + uow.warehouse_stock.list_levels(
            product_id=product_id
        )
