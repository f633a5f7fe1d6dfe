"""Order aggregate.

The Order owns its lines and its status.  It references products and
warehouses but never owns stock: quantities are moved by the orchestrating
handlers through the inventory store, in the same transaction that persists
the order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockflow.domain.exceptions import InvalidStateError, ValidationError
from stockflow.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# Forward progression; CANCELLED is handled separately by ``cancel()``.
NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

MAX_ORDER_LINES = 200


@dataclass(frozen=True)
class OrderLine:
    """Captures the price of a product at order-creation time.

    Later catalog price changes never alter historical lines.
    """

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity.value)


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders; the plain constructor is kept
    simple so repositories can reconstitute persisted orders.
    """

    id: int | None
    lines: list[OrderLine]
    warehouse_id: int | None = None
    client_id: int | None = None
    status: OrderStatus = OrderStatus.PENDING
    number: str | None = None
    created_by: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        lines: list[OrderLine],
        warehouse_id: int | None = None,
        client_id: int | None = None,
        created_by: int | None = None,
    ) -> Order:
        if not lines:
            raise ValidationError("Order must contain at least one line")
        if len(lines) > MAX_ORDER_LINES:
            raise ValidationError(f"Maximum {MAX_ORDER_LINES} lines per order")
        return Order(
            id=None,
            lines=list(lines),
            warehouse_id=warehouse_id,
            client_id=client_id,
            created_by=created_by,
        )

    # --- State transitions ----------------------------------------------------

    def advance_to(self, new_status: OrderStatus) -> OrderStatus:
        """Move one step forward along PENDING -> PROCESSING -> SHIPPED -> DELIVERED.

        Returns the previous status so the repository can guard the write.
        """
        if new_status is OrderStatus.CANCELLED:
            raise ValidationError("Use cancel() to cancel an order")
        expected = NEXT_STATUS.get(self.status)
        if expected is None or expected is not new_status:
            raise InvalidStateError(
                f"Cannot move order {self.label} from {self.status.value} "
                f"to {new_status.value}"
            )
        previous = self.status
        self.status = new_status
        return previous

    def cancel(self) -> OrderStatus:
        """Transition PENDING|PROCESSING|SHIPPED -> CANCELLED.

        Stock restoration must happen in the same transaction, coordinated
        by the cancellation handler.  Returns the previous status.
        """
        if self.status is OrderStatus.CANCELLED:
            raise InvalidStateError(f"Order {self.label} is already cancelled")
        if self.status is OrderStatus.DELIVERED:
            raise InvalidStateError(
                f"Cannot cancel order {self.label}: current status is DELIVERED"
            )
        previous = self.status
        self.status = OrderStatus.CANCELLED
        return previous

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return Money.sum(line.line_total for line in self.lines)

    @property
    def label(self) -> str:
        return self.number or f"#{self.id}"

    def quantities_by_product(self) -> dict[int, int]:
        """Sum of line quantities per product (duplicate lines merged)."""
        totals: dict[int, int] = {}
        for line in self.lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity.value
        return totals
