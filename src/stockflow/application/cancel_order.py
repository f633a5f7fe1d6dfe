"""Application service: Cancel Order use case.

Cancellation is the exact inverse of fulfillment: every line's quantity
goes back to the stock row it came from (the per-warehouse record is
re-created if it was removed meanwhile) and a RETURN movement mirrors each
OUT movement.  The status write is guarded on the status we read, so two
concurrent cancellations cannot both restore stock.
"""

from __future__ import annotations

import logging

from stockflow.application.dto import OrderDTO, order_to_dto
from stockflow.domain.exceptions import EntityNotFoundError, WriteConflictError
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, actor_id: int | None = None) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # Raises InvalidStateError for DELIVERED / CANCELLED orders
            previous = order.cancel()
            if not uow.orders.save_status(order, expected=previous):
                raise WriteConflictError(
                    f"Order {order.label} changed status concurrently; please retry"
                )

            store = uow.stock_for(order.warehouse_id)
            for line in order.lines:
                update = store.increment(
                    line.product_id, order.warehouse_id, line.quantity.value
                )
                if not update.applied:
                    logger.warning(
                        "Restock of product #%s (warehouse %s) failed: %s; "
                        "rolling back cancellation of %s",
                        line.product_id, order.warehouse_id, update.outcome.value, order.label,
                    )
                    raise WriteConflictError(
                        f"Could not restore stock for {line.product_name}; "
                        f"order {order.label} was not cancelled"
                    )
                product = uow.products.get_by_id(line.product_id)
                uow.movements.append(
                    StockMovement(
                        product_id=line.product_id,
                        warehouse_id=order.warehouse_id,
                        kind=MovementKind.RETURN,
                        quantity=line.quantity.value,
                        reason=f"Cancellation of order {order.label}",
                        reference_type=ReferenceType.ORDER,
                        reference_id=str(order.id),
                        unit_cost=product.unit_cost if product else None,
                        actor_id=actor_id,
                    )
                )
            uow.commit()

        logger.info("Order %s cancelled (was %s)", order.label, previous.value)
        return order_to_dto(order)
