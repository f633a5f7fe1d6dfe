"""Application service: Transfer Stock use case.

Moves units between two warehouses in one transaction: guarded decrement
at the source, increment at the destination (record created if needed),
and a pair of TRANSFER movements (-q at source, +q at destination) that
share one transfer reference.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from stockflow.application.dto import StockLevelDTO, level_to_dto
from stockflow.application.lookups import require_active_product, require_warehouse
from stockflow.domain.exceptions import (
    InsufficientStockError,
    Shortfall,
    ValidationError,
    WriteConflictError,
)
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.model.value_objects import Quantity
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferDTO:
    reference: str
    source: StockLevelDTO
    destination: StockLevelDTO


class TransferStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        source_id: int,
        destination_id: int,
        quantity: int,
        reason: str = "Warehouse transfer",
        actor_id: int | None = None,
    ) -> TransferDTO:
        qty = Quantity(quantity).value
        if source_id == destination_id:
            raise ValidationError("Source and destination warehouses must differ")

        reference = uuid.uuid4().hex[:12]
        with self._uow as uow:
            source = require_warehouse(uow, source_id)
            destination = require_warehouse(uow, destination_id)
            product = require_active_product(uow, product_id)
            store = uow.warehouse_stock

            level = store.get_level(product_id, source_id)
            available = level.available if level else 0
            if qty > available:
                raise InsufficientStockError(
                    [Shortfall(product_id, product.name, qty, available)]
                )

            out = store.conditional_decrement(product_id, source_id, qty)
            if not out.applied:
                raise WriteConflictError(
                    f"Stock for '{product.name}' in {source.code} changed during "
                    f"the transfer; nothing was moved, please retry"
                )
            into = store.increment(product_id, destination_id, qty)

            for warehouse_id, delta in ((source_id, -qty), (destination_id, qty)):
                uow.movements.append(
                    StockMovement(
                        product_id=product_id,
                        warehouse_id=warehouse_id,
                        kind=MovementKind.TRANSFER,
                        quantity=delta,
                        reason=f"{reason} {source.code} -> {destination.code}",
                        reference_type=ReferenceType.TRANSFER,
                        reference_id=reference,
                        unit_cost=product.unit_cost,
                        actor_id=actor_id,
                    )
                )
            uow.commit()

        logger.info(
            "Transfer %s: %d x %s %s -> %s",
            reference, qty, product.name, source.code, destination.code,
        )
        return TransferDTO(
            reference=reference,
            source=level_to_dto(out.current, product.name),
            destination=level_to_dto(into.current, product.name),
        )
