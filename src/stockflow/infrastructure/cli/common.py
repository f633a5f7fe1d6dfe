"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from stockflow.application.dto import OrderLineRequest, StockLevelDTO
from stockflow.domain.exceptions import DomainException


def fail(exc: DomainException) -> click.ClickException:
    """Turn a domain error into a CLI error that names its kind."""
    return click.ClickException(f"[{exc.kind.value}] {exc}")


def _split_pair(pair: str, expected: str) -> list[str]:
    parts = [p.strip() for p in pair.split(":")]
    if len(parts) < 2 or not all(parts):
        raise click.BadParameter(f"Invalid item format '{pair}'. Expected '{expected}'.")
    return parts


def _to_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid {what} '{raw}'.")


def parse_order_lines(raw: str) -> list[OrderLineRequest]:
    """Parse '1:3,2:5:19.90' into OrderLineRequest list (price optional)."""
    lines: list[OrderLineRequest] = []
    for pair in raw.split(","):
        parts = _split_pair(pair.strip(), "ProductId:Qty[:UnitPrice]")
        if len(parts) > 3:
            raise click.BadParameter(f"Too many fields in '{pair.strip()}'.")
        lines.append(
            OrderLineRequest(
                product_id=_to_int(parts[0], "product id"),
                quantity=_to_int(parts[1], "quantity"),
                unit_price=parts[2] if len(parts) == 3 else None,
            )
        )
    return lines


def parse_quantities(raw: str) -> dict[int, int]:
    """Parse '1:3,2:5' into {product_id: qty}; repeated products are summed."""
    result: dict[int, int] = {}
    for pair in raw.split(","):
        parts = _split_pair(pair.strip(), "ProductId:Qty")
        if len(parts) != 2:
            raise click.BadParameter(f"Too many fields in '{pair.strip()}'.")
        product_id = _to_int(parts[0], "product id")
        result[product_id] = result.get(product_id, 0) + _to_int(parts[1], "quantity")
    return result


def scope_label(warehouse_id: int | None) -> str:
    return "global" if warehouse_id is None else f"#{warehouse_id}"


def echo_levels(levels: list[StockLevelDTO]) -> None:
    click.echo(
        f"{'ID':<6} {'Product':<24} {'Warehouse':<10} {'Qty':>8} {'Reserved':>9} {'Available':>10}"
    )
    click.echo("-" * 72)
    for level in levels:
        click.echo(
            f"{level.product_id:<6} {level.product_name:<24} "
            f"{scope_label(level.warehouse_id):<10} {level.quantity:>8} "
            f"{level.reserved:>9} {level.available:>10}"
        )
