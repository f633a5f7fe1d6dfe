"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from stockflow.application.advance_order import AdvanceOrderHandler
from stockflow.application.cancel_order import CancelOrderHandler
from stockflow.application.create_order import CreateOrderHandler
from stockflow.application.dto import OrderDTO
from stockflow.application.show_order import ListOrdersHandler, ShowOrderHandler
from stockflow.domain.exceptions import DomainException
from stockflow.domain.model.order import OrderStatus
from stockflow.infrastructure.bootstrap import Container
from stockflow.infrastructure.cli.common import fail, parse_order_lines, scope_label


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.number}  (id={dto.id}, status={dto.status})")
    click.echo(f"Client:    {dto.client_id if dto.client_id is not None else '-'}")
    click.echo(f"Warehouse: {scope_label(dto.warehouse_id)}")
    click.echo(f"Created:   {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<24} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")


@click.command("create")
@click.option("--items", required=True, help="Lines as 'ProductId:Qty[:Price],...'.")
@click.option("--warehouse", "warehouse_id", type=int, default=None, help="Fulfil from this warehouse.")
@click.option("--client", "client_id", type=int, default=None, help="Client ID.")
@click.option("--actor", "actor_id", type=int, default=None, help="User placing the order.")
@click.pass_obj
def order_create(
    app: Container,
    items: str,
    warehouse_id: int | None,
    client_id: int | None,
    actor_id: int | None,
) -> None:
    """Create an order and take its stock."""
    lines = parse_order_lines(items)
    handler = CreateOrderHandler(app.unit_of_work(), app.outbox)

    try:
        dto = handler.handle(
            lines, warehouse_id=warehouse_id, client_id=client_id, actor_id=actor_id
        )
    except DomainException as exc:
        raise fail(exc)

    _display_order(dto)
    app.dispatcher.drain()


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(app: Container, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = ShowOrderHandler(app.unit_of_work()).handle(order_id)
    except DomainException as exc:
        raise fail(exc)

    _display_order(dto)


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    default=None,
)
@click.option("--client", "client_id", type=int, default=None)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=20, show_default=True)
@click.pass_obj
def order_list(
    app: Container, status: str | None, client_id: int | None, page: int, limit: int
) -> None:
    """List orders, newest first."""
    try:
        result = ListOrdersHandler(app.unit_of_work()).handle(
            status=status, client_id=client_id, page=page, limit=limit
        )
    except DomainException as exc:
        raise fail(exc)

    if not result.items:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<12} {'Status':<11} {'Client':>7} {'Lines':>6} {'Total':>14}")
    click.echo("-" * 54)
    for dto in result.items:
        client = dto.client_id if dto.client_id is not None else "-"
        click.echo(
            f"{dto.number:<12} {dto.status:<11} {client:>7} {len(dto.lines):>6} {dto.total:>14}"
        )
    click.echo(f"Page {result.page}/{max(result.total_pages, 1)} ({result.total} orders)")


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice(["PROCESSING", "SHIPPED", "DELIVERED"], case_sensitive=False),
    help="Next status.",
)
@click.pass_obj
def order_advance(app: Container, order_id: int, status: str) -> None:
    """Move an order one step forward."""
    try:
        dto = AdvanceOrderHandler(app.unit_of_work()).handle(order_id, status)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order {dto.number} is now {dto.status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--actor", "actor_id", type=int, default=None)
@click.pass_obj
def order_cancel(app: Container, order_id: int, actor_id: int | None) -> None:
    """Cancel an order and put its stock back."""
    try:
        dto = CancelOrderHandler(app.unit_of_work()).handle(order_id, actor_id=actor_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order {dto.number} cancelled; stock restored.")
