import logging

import click

from stockflow.infrastructure.bootstrap import Container, build
from stockflow.infrastructure.cli.inventory_commands import (
    stock_adjust,
    stock_available,
    stock_low,
    stock_out,
    stock_receive,
    stock_release,
    stock_remove,
    stock_reserve,
    stock_show,
    stock_transfer,
)
from stockflow.infrastructure.cli.movement_commands import (
    movement_balance,
    movement_list,
    movement_stats,
)
from stockflow.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_create,
    order_list,
    order_show,
)
from stockflow.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    warehouse_add,
    warehouse_list,
)
from stockflow.infrastructure.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """StockFlow: stock control and order fulfillment"""
    if isinstance(ctx.obj, Container):
        # supplied by the caller (tests, embedding); the caller closes it
        return
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    app = build(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def warehouse() -> None:
    """Manage warehouses."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


@cli.group()
def movement() -> None:
    """Inspect the stock ledger."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
warehouse.add_command(warehouse_add)
warehouse.add_command(warehouse_list)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
stock.add_command(stock_adjust)
stock.add_command(stock_available)
stock.add_command(stock_low)
stock.add_command(stock_out)
stock.add_command(stock_receive)
stock.add_command(stock_release)
stock.add_command(stock_remove)
stock.add_command(stock_reserve)
stock.add_command(stock_show)
stock.add_command(stock_transfer)
movement.add_command(movement_balance)
movement.add_command(movement_list)
movement.add_command(movement_stats)
