"""CLI commands for stock levels: receipts, adjustments, holds and transfers.

Every command works on the global counter unless ``--warehouse`` is given.
"""

from __future__ import annotations

import click

from stockflow.application.adjust_stock import AdjustMode, AdjustStockHandler
from stockflow.application.receive_stock import ReceiveStockHandler
from stockflow.application.remove_inventory import RemoveInventoryRecordHandler
from stockflow.application.reserve_stock import ReleaseStockHandler, ReserveStockHandler
from stockflow.application.show_inventory import ShowInventoryHandler
from stockflow.application.transfer_stock import TransferStockHandler
from stockflow.domain.exceptions import DomainException
from stockflow.infrastructure.bootstrap import Container
from stockflow.infrastructure.cli.common import echo_levels, fail, parse_quantities, scope_label

_warehouse_option = click.option(
    "--warehouse", "warehouse_id", type=int, default=None, help="Warehouse ID (default: global stock)."
)


@click.command("receive")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
@_warehouse_option
@click.option("--cost", default=None, help="Unit cost of this receipt.")
@click.option("--reference", default=None, help="Delivery note or purchase reference.")
@click.option("--reason", default="Stock receipt", show_default=True)
@click.pass_obj
def stock_receive(
    app: Container,
    product_id: int,
    quantity: int,
    warehouse_id: int | None,
    cost: str | None,
    reference: str | None,
    reason: str,
) -> None:
    """Receive stock into the global counter or a warehouse."""
    try:
        level = ReceiveStockHandler(app.unit_of_work()).handle(
            product_id,
            quantity,
            warehouse_id=warehouse_id,
            reason=reason,
            unit_cost=cost,
            reference_id=reference,
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(
        f"Received {quantity} x '{level.product_name}' "
        f"({scope_label(warehouse_id)}): {level.quantity} on hand"
    )


@click.command("adjust")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Counted or moved units.")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in AdjustMode]),
    default=AdjustMode.SET.value,
    show_default=True,
    help="set = physical count, add / remove = relative correction.",
)
@_warehouse_option
@click.option("--reason", default="Manual adjustment", show_default=True)
@click.pass_obj
def stock_adjust(
    app: Container,
    product_id: int,
    quantity: int,
    mode: str,
    warehouse_id: int | None,
    reason: str,
) -> None:
    """Correct a stock level by hand."""
    try:
        level = AdjustStockHandler(app.unit_of_work()).handle(
            product_id, quantity, warehouse_id=warehouse_id, mode=mode, reason=reason
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(
        f"'{level.product_name}' ({scope_label(warehouse_id)}) now at {level.quantity} "
        f"({level.reserved} reserved)"
    )


@click.command("reserve")
@click.option("--items", required=True, help="Units to hold as 'ProductId:Qty,...'.")
@_warehouse_option
@click.option("--reference", default=None, help="Quote or document holding the units.")
@click.pass_obj
def stock_reserve(
    app: Container, items: str, warehouse_id: int | None, reference: str | None
) -> None:
    """Hold units against a quote (all lines or none)."""
    quantities = parse_quantities(items)
    try:
        levels = ReserveStockHandler(app.unit_of_work()).handle(
            quantities, warehouse_id=warehouse_id, reference=reference
        )
    except DomainException as exc:
        raise fail(exc)

    echo_levels(levels)


@click.command("release")
@click.option("--items", required=True, help="Units to release as 'ProductId:Qty,...'.")
@_warehouse_option
@click.option("--reference", default=None)
@click.pass_obj
def stock_release(
    app: Container, items: str, warehouse_id: int | None, reference: str | None
) -> None:
    """Release previously held units (all lines or none)."""
    quantities = parse_quantities(items)
    try:
        levels = ReleaseStockHandler(app.unit_of_work()).handle(
            quantities, warehouse_id=warehouse_id, reference=reference
        )
    except DomainException as exc:
        raise fail(exc)

    echo_levels(levels)


@click.command("transfer")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--from", "source_id", required=True, type=int, help="Source warehouse ID.")
@click.option("--to", "destination_id", required=True, type=int, help="Destination warehouse ID.")
@click.option("--quantity", required=True, type=int)
@click.option("--reason", default="Warehouse transfer", show_default=True)
@click.pass_obj
def stock_transfer(
    app: Container,
    product_id: int,
    source_id: int,
    destination_id: int,
    quantity: int,
    reason: str,
) -> None:
    """Move units between two warehouses."""
    try:
        result = TransferStockHandler(app.unit_of_work()).handle(
            product_id, source_id, destination_id, quantity, reason=reason
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Transfer {result.reference}: {quantity} x '{result.source.product_name}'")
    echo_levels([result.source, result.destination])


@click.command("remove")
@click.option("--product", "product_id", required=True, type=int)
@click.option("--warehouse", "warehouse_id", required=True, type=int)
@click.pass_obj
def stock_remove(app: Container, product_id: int, warehouse_id: int) -> None:
    """Delete a product's record in a warehouse."""
    try:
        RemoveInventoryRecordHandler(app.unit_of_work()).handle(product_id, warehouse_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Stock record for product #{product_id} in warehouse #{warehouse_id} removed.")


@click.command("show")
@click.option("--product", "product_id", type=int, default=None)
@_warehouse_option
@click.pass_obj
def stock_show(app: Container, product_id: int | None, warehouse_id: int | None) -> None:
    """Show current stock levels."""
    try:
        levels = ShowInventoryHandler(app.unit_of_work()).handle(
            product_id=product_id, warehouse_id=warehouse_id
        )
    except DomainException as exc:
        raise fail(exc)

    if not levels:
        click.echo("No stock records found.")
        return
    echo_levels(levels)


@click.command("low")
@_warehouse_option
@click.pass_obj
def stock_low(app: Container, warehouse_id: int | None) -> None:
    """List rows at or below their minimum, with reorder suggestions."""
    rows = ShowInventoryHandler(app.unit_of_work()).low_stock(warehouse_id=warehouse_id)
    if not rows:
        click.echo("No low-stock rows.")
        return

    click.echo(f"{'ID':<6} {'Product':<24} {'Warehouse':<10} {'Qty':>6} {'Min':>6} {'Reorder':>8}")
    click.echo("-" * 65)
    for row in rows:
        click.echo(
            f"{row.level.product_id:<6} {row.level.product_name:<24} "
            f"{scope_label(row.level.warehouse_id):<10} {row.level.quantity:>6} "
            f"{row.min_threshold:>6} {row.reorder_quantity:>8}"
        )


@click.command("out")
@_warehouse_option
@click.pass_obj
def stock_out(app: Container, warehouse_id: int | None) -> None:
    """List rows with nothing on hand."""
    levels = ShowInventoryHandler(app.unit_of_work()).out_of_stock(warehouse_id=warehouse_id)
    if not levels:
        click.echo("Nothing is out of stock.")
        return
    echo_levels(levels)


@click.command("available")
@click.option("--product", "product_id", required=True, type=int)
@_warehouse_option
@click.pass_obj
def stock_available(app: Container, product_id: int, warehouse_id: int | None) -> None:
    """Show quantity, reserved and available units for one product."""
    try:
        level = ShowInventoryHandler(app.unit_of_work()).availability(
            product_id, warehouse_id=warehouse_id
        )
    except DomainException as exc:
        raise fail(exc)

    echo_levels([level])
