"""Application service: Create Order use case (order fulfillment).

Flow:
1. Resolve products and the warehouse, then pre-check availability for
   every line.  This read is best-effort; it only short-circuits requests
   that are obviously doomed and reports every short line at once.
2. In one unit of work: persist the order with price snapshots, run a
   guarded decrement per line and append one OUT movement per line.  A
   decrement that loses a race aborts the whole unit, so a partially
   fulfilled order is never left behind.
3. After commit, evaluate thresholds and hand alerts to the outbox.
"""

from __future__ import annotations

import logging

from stockflow.application.dto import OrderDTO, OrderLineRequest, order_to_dto
from stockflow.application.lookups import require_active_product, require_scope
from stockflow.domain.exceptions import (
    InsufficientStockError,
    Shortfall,
    ValidationError,
    WriteConflictError,
)
from stockflow.domain.model.inventory import StockLevel
from stockflow.domain.model.movement import MovementKind, ReferenceType, StockMovement
from stockflow.domain.model.order import Order, OrderLine
from stockflow.domain.model.product import Product
from stockflow.domain.model.value_objects import Money, Quantity
from stockflow.domain.repository.alert_outbox import AlertOutbox
from stockflow.domain.repository.unit_of_work import UnitOfWork
from stockflow.domain.service import low_stock_policy

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, outbox: AlertOutbox) -> None:
        self._uow = uow
        self._outbox = outbox

    def handle(
        self,
        lines: list[OrderLineRequest],
        warehouse_id: int | None = None,
        client_id: int | None = None,
        actor_id: int | None = None,
    ) -> OrderDTO:
        if not lines:
            raise ValidationError("Order must contain at least one line")

        # Phase 1: resolve and pre-check (no writes)
        with self._uow as uow:
            require_scope(uow, warehouse_id)
            products: dict[int, Product] = {}
            for req in lines:
                Quantity(req.quantity)
                if req.product_id not in products:
                    products[req.product_id] = require_active_product(uow, req.product_id)
            self._precheck(uow, products, lines, warehouse_id)

        order_lines = [
            OrderLine(
                product_id=req.product_id,
                product_name=products[req.product_id].name,
                quantity=Quantity(req.quantity),
                unit_price=(
                    Money.of(req.unit_price)
                    if req.unit_price is not None
                    else products[req.product_id].sale_price  # <-- price snapshot
                ),
            )
            for req in lines
        ]
        order = Order.create(
            lines=order_lines,
            warehouse_id=warehouse_id,
            client_id=client_id,
            created_by=actor_id,
        )

        # Phase 2: one transaction for the order, its stock and its ledger rows
        levels: list[StockLevel] = []
        with self._uow as uow:
            uow.orders.add(order)
            store = uow.stock_for(warehouse_id)
            for line in order.lines:
                update = store.conditional_decrement(
                    line.product_id, warehouse_id, line.quantity.value
                )
                if not update.applied:
                    logger.warning(
                        "Decrement lost for product #%s (warehouse %s): %s; "
                        "rolling back order",
                        line.product_id, warehouse_id, update.outcome.value,
                    )
                    raise WriteConflictError(
                        f"Stock for {line.product_name} changed while the order "
                        f"was being placed; nothing was committed, please resubmit"
                    )
                levels.append(update.current)
                uow.movements.append(
                    StockMovement(
                        product_id=line.product_id,
                        warehouse_id=warehouse_id,
                        kind=MovementKind.OUT,
                        quantity=line.quantity.value,
                        reason=f"Order {order.label}",
                        reference_type=ReferenceType.ORDER,
                        reference_id=str(order.id),
                        unit_cost=products[line.product_id].unit_cost,
                        actor_id=actor_id,
                    )
                )
            uow.commit()

        logger.info(
            "Order %s committed: %d line(s), total %s",
            order.label, len(order.lines), order.total,
        )
        self._publish_alerts(products, levels)
        return order_to_dto(order)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _precheck(
        uow: UnitOfWork,
        products: dict[int, Product],
        lines: list[OrderLineRequest],
        warehouse_id: int | None,
    ) -> None:
        requested: dict[int, int] = {}
        for req in lines:
            requested[req.product_id] = requested.get(req.product_id, 0) + req.quantity

        store = uow.stock_for(warehouse_id)
        shortfalls: list[Shortfall] = []
        for product_id, qty in requested.items():
            level = store.get_level(product_id, warehouse_id)
            available = level.available if level else 0
            if qty > available:
                shortfalls.append(
                    Shortfall(product_id, products[product_id].name, qty, available)
                )
        if shortfalls:
            raise InsufficientStockError(shortfalls)

    def _publish_alerts(
        self, products: dict[int, Product], levels: list[StockLevel]
    ) -> None:
        for alert in low_stock_policy.evaluate(products, levels):
            try:
                self._outbox.put(alert)
            except Exception:
                # the order is committed; a lost alert must not surface as a failure
                logger.exception(
                    "Could not enqueue low-stock alert for product #%s", alert.product_id
                )
