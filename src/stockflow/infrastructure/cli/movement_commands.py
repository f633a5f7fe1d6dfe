"""CLI commands for the stock ledger."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from stockflow.application.list_movements import (
    LedgerBalanceHandler,
    ListMovementsHandler,
    MovementStatisticsHandler,
)
from stockflow.domain.exceptions import DomainException
from stockflow.domain.model.movement import MovementKind, ReferenceType
from stockflow.domain.repository.movement_repository import MovementFilter
from stockflow.infrastructure.bootstrap import Container
from stockflow.infrastructure.cli.common import fail, scope_label


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


@click.command("list")
@click.option("--product", "product_id", type=int, default=None)
@click.option("--warehouse", "warehouse_id", type=int, default=None)
@click.option("--kind", type=click.Choice([k.value for k in MovementKind]), default=None)
@click.option(
    "--reference-type", type=click.Choice([r.value for r in ReferenceType]), default=None
)
@click.option("--reference-id", default=None)
@click.option("--from", "date_from", type=click.DateTime(), default=None, help="UTC.")
@click.option("--to", "date_to", type=click.DateTime(), default=None, help="UTC.")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=50, show_default=True)
@click.pass_obj
def movement_list(
    app: Container,
    product_id: int | None,
    warehouse_id: int | None,
    kind: str | None,
    reference_type: str | None,
    reference_id: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
    page: int,
    limit: int,
) -> None:
    """List ledger entries, newest first."""
    criteria = MovementFilter(
        product_id=product_id,
        warehouse_id=warehouse_id,
        kind=MovementKind(kind) if kind else None,
        reference_type=ReferenceType(reference_type) if reference_type else None,
        reference_id=reference_id,
        date_from=_as_utc(date_from),
        date_to=_as_utc(date_to),
    )
    result = ListMovementsHandler(app.unit_of_work()).handle(criteria, page=page, limit=limit)

    if not result.items:
        click.echo("No movements found.")
        return

    click.echo(
        f"{'ID':<6} {'When':<24} {'Kind':<9} {'Product':>7} {'Wh':<8} {'Delta':>7}  Reason"
    )
    click.echo("-" * 80)
    for m in result.items:
        click.echo(
            f"{m.id:<6} {m.created_at:<24} {m.kind:<9} {m.product_id:>7} "
            f"{scope_label(m.warehouse_id):<8} {m.delta:>+7}  {m.reason}"
        )
    click.echo(f"Page {result.page}/{max(result.total_pages, 1)} ({result.total} movements)")


@click.command("stats")
@click.pass_obj
def movement_stats(app: Container) -> None:
    """Count ledger entries per kind."""
    stats = MovementStatisticsHandler(app.unit_of_work()).handle()
    for kind, count in stats.items():
        click.echo(f"{kind:<9} {count:>8}")


@click.command("balance")
@click.option("--product", "product_id", required=True, type=int)
@click.option("--warehouse", "warehouse_id", type=int, default=None)
@click.pass_obj
def movement_balance(app: Container, product_id: int, warehouse_id: int | None) -> None:
    """Compare the ledger's net change with the stored quantity."""
    try:
        balance = LedgerBalanceHandler(app.unit_of_work()).handle(product_id, warehouse_id)
    except DomainException as exc:
        raise fail(exc)

    status = "OK" if balance.ledger_net == balance.quantity else "MISMATCH"
    click.echo(
        f"Product #{product_id} ({scope_label(warehouse_id)}): ledger {balance.ledger_net}, "
        f"stored {balance.quantity} [{status}]"
    )
