"""Application service: Advance Order status use case.

Moves an order one step along PENDING -> PROCESSING -> SHIPPED -> DELIVERED.
Stock is untouched: units left the store when the order was created.
"""

from __future__ import annotations

import logging

from stockflow.application.dto import OrderDTO, order_to_dto
from stockflow.domain.exceptions import (
    EntityNotFoundError,
    ValidationError,
    WriteConflictError,
)
from stockflow.domain.model.order import OrderStatus
from stockflow.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def parse_status(raw: str | OrderStatus) -> OrderStatus:
    if isinstance(raw, OrderStatus):
        return raw
    try:
        return OrderStatus(raw.strip().upper())
    except ValueError as exc:
        raise ValidationError(f"Unknown order status: {raw!r}") from exc


class AdvanceOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, new_status: str | OrderStatus) -> OrderDTO:
        target = parse_status(new_status)
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.advance_to(target)
            if not uow.orders.save_status(order, expected=previous):
                raise WriteConflictError(
                    f"Order {order.label} changed status concurrently; please retry"
                )
            uow.commit()

        logger.info("Order %s moved %s -> %s", order.label, previous.value, target.value)
        return order_to_dto(order)
