"""CLI commands for catalog seeding: products and warehouses."""

from __future__ import annotations

import click

from stockflow.application.add_product import AddProductHandler, AddWarehouseHandler
from stockflow.domain.exceptions import DomainException
from stockflow.infrastructure.bootstrap import Container
from stockflow.infrastructure.cli.common import fail


@click.command("add")
@click.option("--sku", required=True, help="Unique stock keeping unit.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Sale price (e.g. 15.00).")
@click.option("--cost", default="0", show_default=True, help="Unit cost.")
@click.option("--min", "min_threshold", type=int, default=0, show_default=True)
@click.option("--max", "max_threshold", type=int, default=None)
@click.pass_obj
def product_add(
    app: Container,
    sku: str,
    name: str,
    price: str,
    cost: str,
    min_threshold: int,
    max_threshold: int | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(app.unit_of_work())

    try:
        product = handler.handle(
            sku=sku,
            name=name,
            sale_price=price,
            unit_cost=cost,
            min_threshold=min_threshold,
            max_threshold=max_threshold,
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Product #{product.id} '{product.name}' added at {product.sale_price}")


@click.command("list")
@click.pass_obj
def product_list(app: Container) -> None:
    """List all products in the catalog."""
    with app.unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<12} {'Name':<24} {'Price':>12} {'Min':>5} {'Max':>5}")
    click.echo("-" * 69)
    for p in products:
        max_ = p.max_threshold if p.max_threshold is not None else "-"
        click.echo(
            f"{p.id:<6} {p.sku:<12} {p.name:<24} {str(p.sale_price):>12} "
            f"{p.min_threshold:>5} {max_:>5}"
        )


@click.command("add")
@click.option("--code", required=True, help="Short unique warehouse code.")
@click.option("--name", default="", help="Display name.")
@click.option("--capacity", type=int, default=None)
@click.pass_obj
def warehouse_add(app: Container, code: str, name: str, capacity: int | None) -> None:
    """Register a warehouse."""
    try:
        warehouse = AddWarehouseHandler(app.unit_of_work()).handle(
            code=code, name=name, capacity=capacity
        )
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Warehouse #{warehouse.id} '{warehouse.code}' added")


@click.command("list")
@click.pass_obj
def warehouse_list(app: Container) -> None:
    """List all warehouses."""
    with app.unit_of_work() as uow:
        warehouses = uow.warehouses.list_all()

    if not warehouses:
        click.echo("No warehouses found.")
        return

    click.echo(f"{'ID':<6} {'Code':<10} {'Name':<24} {'Active':<6}")
    click.echo("-" * 49)
    for w in warehouses:
        click.echo(f"{w.id:<6} {w.code:<10} {w.name:<24} {'yes' if w.active else 'no':<6}")
