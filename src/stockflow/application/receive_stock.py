"""Application service: Receive Stock use case (restock).

Increments always succeed; the per-warehouse record is created on the
first receipt into a warehouse.
"""

from __future__ import annotations

import logging

from stockflow.application.dto import StockLevelDTO, level_to_dto
from stockflow.application.lookups import require_active_product, require_scope
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.model.value_objects import Money, Quantity
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ReceiveStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        quantity: int,
        warehouse_id: int | None = None,
        reason: str = "Stock receipt",
        unit_cost: str | None = None,
        reference_id: str | None = None,
        actor_id: int | None = None,
    ) -> StockLevelDTO:
        qty = Quantity(quantity).value
        with self._uow as uow:
            require_scope(uow, warehouse_id)
            product = require_active_product(uow, product_id)

            update = uow.stock_for(warehouse_id).increment(product_id, warehouse_id, qty)
            uow.movements.append(
                StockMovement(
                    product_id=product_id,
                    warehouse_id=warehouse_id,
                    kind=MovementKind.IN,
                    quantity=qty,
                    reason=reason,
                    reference_type=ReferenceType.RECEIPT if reference_id else None,
                    reference_id=reference_id,
                    unit_cost=Money.of(unit_cost) if unit_cost else product.unit_cost,
                    actor_id=actor_id,
                )
            )
            uow.commit()

        logger.info(
            "Received %d x %s (warehouse %s) -> %d on hand",
            qty, product.name, warehouse_id, update.current.quantity,
        )
        return level_to_dto(update.current, product.name)
