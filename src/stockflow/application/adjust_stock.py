"""Application service: Adjust Stock use case (manual correction).

Three modes:
- ``set``: physical count, absolute quantity.  Refused below the reserved
  quantity, since that would break ``reserved <= quantity``.
- ``add``: found / corrected units.
- ``remove``: damaged / lost units; never more than is available.

Each effective change writes one ADJUST movement carrying the signed delta.
"""

from __future__ import annotations

import logging
from enum import Enum

from stockflow.application.dto import StockLevelDTO, level_to_dto
from stockflow.application.lookups import require_active_product, require_scope
from stockflow.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidStateError,
    Shortfall,
    ValidationError,
    WriteConflictError,
)
from stockflow.domain.model.inventory import StockOutcome, StockUpdate
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.model.value_objects import Quantity
from stockflow.domain.repository.stock_store import StockStore
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AdjustMode(Enum):
    SET = "set"
    ADD = "add"
    REMOVE = "remove"


class AdjustStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        quantity: int,
        warehouse_id: int | None = None,
        mode: AdjustMode | str = AdjustMode.SET,
        reason: str = "Manual adjustment",
        actor_id: int | None = None,
    ) -> StockLevelDTO:
        mode = AdjustMode(mode)
        if mode is AdjustMode.SET:
            if quantity < 0:
                raise ValidationError("Counted quantity cannot be negative")
        else:
            Quantity(quantity)

        with self._uow as uow:
            require_scope(uow, warehouse_id)
            product = require_active_product(uow, product_id)
            store = uow.stock_for(warehouse_id)

            if mode is AdjustMode.SET:
                update = self._set(store, product_id, product.name, warehouse_id, quantity)
            elif mode is AdjustMode.ADD:
                update = store.increment(product_id, warehouse_id, quantity)
                update = StockUpdate(update.outcome, update.level, delta=quantity)
            else:
                update = self._remove(store, product_id, product.name, warehouse_id, quantity)

            if update.delta != 0:
                uow.movements.append(
                    StockMovement(
                        product_id=product_id,
                        warehouse_id=warehouse_id,
                        kind=MovementKind.ADJUST,
                        quantity=update.delta,
                        reason=reason,
                        reference_type=ReferenceType.ADJUSTMENT,
                        unit_cost=product.unit_cost,
                        actor_id=actor_id,
                    )
                )
            uow.commit()

        logger.info(
            "Adjusted %s (warehouse %s, %s %d): delta %+d",
            product.name, warehouse_id, mode.value, quantity, update.delta,
        )
        return level_to_dto(update.current, product.name)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _set(
        store: StockStore, product_id: int, name: str, warehouse_id: int | None, quantity: int
    ) -> StockUpdate:
        update = store.adjust_absolute(product_id, warehouse_id, quantity)
        if update.outcome is StockOutcome.MISSING:
            if quantity == 0:
                raise EntityNotFoundError(
                    f"No stock record for '{name}' in warehouse #{warehouse_id}"
                )
            created = store.increment(product_id, warehouse_id, quantity)
            return StockUpdate(StockOutcome.APPLIED, created.level, delta=quantity)
        if update.outcome is StockOutcome.REFUSED:
            reserved = update.level.reserved if update.level else 0
            raise InvalidStateError(
                f"Cannot set '{name}' to {quantity}: {reserved} unit(s) are "
                f"reserved, minimum allowed quantity is {reserved}"
            )
        if update.outcome is StockOutcome.CONFLICT:
            raise WriteConflictError(
                f"Stock for '{name}' changed during the adjustment; please retry"
            )
        return update

    @staticmethod
    def _remove(
        store: StockStore, product_id: int, name: str, warehouse_id: int | None, quantity: int
    ) -> StockUpdate:
        level = store.get_level(product_id, warehouse_id)
        available = level.available if level else 0
        if quantity > available:
            raise InsufficientStockError([Shortfall(product_id, name, quantity, available)])
        update = store.conditional_decrement(product_id, warehouse_id, quantity)
        if not update.applied:
            raise WriteConflictError(
                f"Stock for '{name}' changed during the adjustment; please retry"
            )
        return StockUpdate(update.outcome, update.level, delta=-quantity)
