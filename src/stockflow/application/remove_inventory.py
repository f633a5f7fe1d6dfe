"""Application service: Remove Inventory Record use case.

Deleting a (product, warehouse) record is refused while units are held
by reservations.  Units still on hand are written off with an ADJUST
movement so the ledger keeps reconciling with the store.
"""

from __future__ import annotations

import logging

from stockflow.application.lookups import require_product
from stockflow.domain.exceptions import EntityNotFoundError, InvalidStateError
from stockflow.domain.model.inventory import StockOutcome
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class RemoveInventoryRecordHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, warehouse_id: int, actor_id: int | None = None) -> None:
        with self._uow as uow:
            if uow.warehouses.get_by_id(warehouse_id) is None:
                raise EntityNotFoundError(f"Warehouse #{warehouse_id} not found")
            product = require_product(uow, product_id)

            update = uow.warehouse_stock.remove(product_id, warehouse_id)
            if update.outcome is StockOutcome.MISSING:
                raise EntityNotFoundError(
                    f"No stock record for '{product.name}' in warehouse #{warehouse_id}"
                )
            if update.outcome is StockOutcome.REFUSED:
                raise InvalidStateError(
                    f"Cannot remove record for '{product.name}': "
                    f"{update.current.reserved} unit(s) are reserved"
                )
            if update.delta != 0:
                uow.movements.append(
                    StockMovement(
                        product_id=product_id,
                        warehouse_id=warehouse_id,
                        kind=MovementKind.ADJUST,
                        quantity=update.delta,
                        reason="Inventory record removed",
                        reference_type=ReferenceType.ADJUSTMENT,
                        unit_cost=product.unit_cost,
                        actor_id=actor_id,
                    )
                )
            uow.commit()

        logger.info("Removed stock record for %s in warehouse #%s", product.name, warehouse_id)
