"""CLI tests through click's CliRunner against a temporary SQLite file."""

import pytest
from click.testing import CliRunner

from stockflow.infrastructure.bootstrap import build
from stockflow.infrastructure.cli.main import cli


@pytest.fixture
def app(settings):
    container = build(settings)
    yield container
    container.close()


@pytest.fixture
def run(app):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, list(args), obj=app)

    return _run


@pytest.fixture
def seeded(run):
    assert run("product", "add", "--sku", "W-1", "--name", "Widget", "--price", "15.00", "--min", "5").exit_code == 0
    assert run("warehouse", "add", "--code", "MAIN", "--name", "Main").exit_code == 0
    assert run("stock", "receive", "--product", "1", "--quantity", "10").exit_code == 0
    return run


class TestCatalogCommands:

    def test_product_list(self, seeded):
        result = seeded("product", "list")
        assert result.exit_code == 0
        assert "Widget" in result.output
        assert "15.00 EUR" in result.output

    def test_duplicate_sku_reports_kind(self, seeded):
        result = seeded("product", "add", "--sku", "W-1", "--name", "Again", "--price", "1")
        assert result.exit_code == 1
        assert "[VALIDATION]" in result.output


class TestOrderCommands:

    def test_create_show_and_cancel(self, seeded):
        created = seeded("order", "create", "--items", "1:3", "--client", "7")
        assert created.exit_code == 0, created.output
        assert "CMD-000001" in created.output
        assert "45.00 EUR" in created.output

        shown = seeded("order", "show", "--id", "1")
        assert "status=PENDING" in shown.output

        cancelled = seeded("order", "cancel", "--id", "1")
        assert cancelled.exit_code == 0
        assert "stock restored" in cancelled.output

        stock = seeded("stock", "available", "--product", "1")
        assert "10" in stock.output

    def test_insufficient_stock(self, seeded):
        result = seeded("order", "create", "--items", "1:11")
        assert result.exit_code == 1
        assert "[INSUFFICIENT_STOCK]" in result.output
        assert "need 11, have 10 available" in result.output

    def test_bad_items_format(self, seeded):
        result = seeded("order", "create", "--items", "widget")
        assert result.exit_code == 2
        assert "Invalid item format" in result.output

    def test_advance_and_list(self, seeded):
        seeded("order", "create", "--items", "1:1")
        assert seeded("order", "advance", "--id", "1", "--status", "processing").exit_code == 0

        listed = seeded("order", "list", "--status", "PROCESSING")
        assert "CMD-000001" in listed.output

        skipped = seeded("order", "advance", "--id", "1", "--status", "DELIVERED")
        assert "[INVALID_STATE]" in skipped.output


class TestStockCommands:

    def test_low_stock_after_adjustment(self, seeded):
        assert seeded("stock", "adjust", "--product", "1", "--quantity", "4").exit_code == 0
        result = seeded("stock", "low")
        assert "Widget" in result.output

    def test_warehouse_transfer(self, seeded):
        seeded("warehouse", "add", "--code", "SOUTH")
        seeded("stock", "receive", "--product", "1", "--quantity", "5", "--warehouse", "1")

        result = seeded("stock", "transfer", "--product", "1", "--from", "1", "--to", "2", "--quantity", "2")
        assert result.exit_code == 0, result.output
        assert "Transfer " in result.output

    def test_reserve_then_release(self, seeded):
        assert seeded("stock", "reserve", "--items", "1:4").exit_code == 0
        over = seeded("stock", "release", "--items", "1:5")
        assert "[INVALID_STATE]" in over.output

    def test_movement_stats_and_balance(self, seeded):
        seeded("order", "create", "--items", "1:2")
        stats = seeded("movement", "stats")
        assert "TOTAL" in stats.output

        balance = seeded("movement", "balance", "--product", "1")
        assert "[OK]" in balance.output

        listed = seeded("movement", "list", "--kind", "OUT")
        assert "Order CMD-000001" in listed.output
