"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockflow.domain.model.inventory import StockLevel
from stockflow.domain.model.movement import StockMovement
from stockflow.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineRequest:
    """Input: one requested line.  ``unit_price`` defaults to the sale price."""

    product_id: int
    quantity: int
    unit_price: str | None = None


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "15.00 EUR"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    number: str
    status: str
    client_id: int | None
    warehouse_id: int | None
    lines: list[OrderLineDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class StockLevelDTO:
    product_id: int
    product_name: str
    warehouse_id: int | None
    quantity: int
    reserved: int
    available: int


@dataclass(frozen=True)
class MovementDTO:
    id: int
    product_id: int
    warehouse_id: int | None
    kind: str
    quantity: int
    delta: int
    reason: str
    reference: str | None  # e.g. "ORDER:12"
    unit_cost: str | None
    actor_id: int | None
    created_at: str


# --- Mapping ------------------------------------------------------------------


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        number=order.label,
        status=order.status.value,
        client_id=order.client_id,
        warehouse_id=order.warehouse_id,
        lines=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def level_to_dto(level: StockLevel, product_name: str) -> StockLevelDTO:
    return StockLevelDTO(
        product_id=level.product_id,
        product_name=product_name,
        warehouse_id=level.warehouse_id,
        quantity=level.quantity,
        reserved=level.reserved,
        available=level.available,
    )


def movement_to_dto(movement: StockMovement) -> MovementDTO:
    reference = None
    if movement.reference_type is not None:
        reference = f"{movement.reference_type.value}:{movement.reference_id}"
    return MovementDTO(
        id=movement.id,  # type: ignore[arg-type]
        product_id=movement.product_id,
        warehouse_id=movement.warehouse_id,
        kind=movement.kind.value,
        quantity=movement.quantity,
        delta=movement.delta,
        reason=movement.reason,
        reference=reference,
        unit_cost=str(movement.unit_cost) if movement.unit_cost else None,
        actor_id=movement.actor_id,
        created_at=movement.created_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
    )
