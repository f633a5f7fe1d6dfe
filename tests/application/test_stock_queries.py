"""Tests for inventory listings, ledger queries and catalog seeding."""

from datetime import datetime, timedelta, timezone

import pytest

from stockflow.application.add_product import AddProductHandler, AddWarehouseHandler
from stockflow.application.cancel_order import CancelOrderHandler
from stockflow.application.create_order import CreateOrderHandler
from stockflow.application.dto import OrderLineRequest
from stockflow.application.list_movements import (
    LedgerBalanceHandler,
    ListMovementsHandler,
    MovementStatisticsHandler,
)
from stockflow.application.receive_stock import ReceiveStockHandler
from stockflow.application.show_inventory import ShowInventoryHandler
from stockflow.domain.exceptions import EntityNotFoundError, ValidationError
from stockflow.domain.model.movement import MovementKind, ReferenceType
from stockflow.domain.repository.movement_repository import MovementFilter
from tests.fakes import FakeDatabase, FakeUnitOfWork, RecordingOutbox


@pytest.fixture
def db() -> FakeDatabase:
    db = FakeDatabase()
    db.seed_product("Widget", quantity=3, min_threshold=5, max_threshold=20)
    db.seed_product("Gadget", quantity=0, min_threshold=2)
    db.seed_product("Gizmo", quantity=50, min_threshold=5)
    db.seed_warehouse("MAIN")
    db.seed_stock(3, 1, 1)
    return db


class TestShowInventory:

    def test_lists_global_then_warehouse_rows(self, db):
        levels = ShowInventoryHandler(FakeUnitOfWork(db)).handle()
        assert [(lv.product_name, lv.warehouse_id) for lv in levels] == [
            ("Widget", None),
            ("Gadget", None),
            ("Gizmo", None),
            ("Gizmo", 1),
        ]

    def test_warehouse_filter(self, db):
        levels = ShowInventoryHandler(FakeUnitOfWork(db)).handle(warehouse_id=1)
        assert [(lv.product_id, lv.quantity) for lv in levels] == [(3, 1)]

    def test_availability_of_absent_row_is_zero(self, db):
        dto = ShowInventoryHandler(FakeUnitOfWork(db)).availability(1, warehouse_id=1)
        assert (dto.quantity, dto.reserved, dto.available) == (0, 0, 0)

    def test_low_stock_sorted_by_reorder_quantity(self, db):
        rows = ShowInventoryHandler(FakeUnitOfWork(db)).low_stock()
        assert [(r.level.product_name, r.level.warehouse_id, r.reorder_quantity) for r in rows] == [
            ("Widget", None, 17),  # max 20 - 3
            ("Gizmo", 1, 9),  # 2 x min 5 - 1
            ("Gadget", None, 4),  # 2 x min 2 - 0
        ]

    def test_low_stock_skips_inactive_products(self, db):
        db.products[1].active = False
        names = [r.level.product_name for r in ShowInventoryHandler(FakeUnitOfWork(db)).low_stock()]
        assert "Widget" not in names

    def test_out_of_stock(self, db):
        levels = ShowInventoryHandler(FakeUnitOfWork(db)).out_of_stock()
        assert [lv.product_name for lv in levels] == ["Gadget"]

    def test_unknown_product(self, db):
        with pytest.raises(EntityNotFoundError):
            ShowInventoryHandler(FakeUnitOfWork(db)).handle(product_id=99)


class TestLedgerQueries:

    @pytest.fixture
    def ledger(self, db) -> FakeDatabase:
        ReceiveStockHandler(FakeUnitOfWork(db)).handle(3, 10)
        orders = CreateOrderHandler(FakeUnitOfWork(db), RecordingOutbox())
        first = orders.handle([OrderLineRequest(3, 4)]).id
        orders.handle([OrderLineRequest(3, 1)])
        CancelOrderHandler(FakeUnitOfWork(db)).handle(first)
        return db

    def test_filter_by_kind(self, ledger):
        page = ListMovementsHandler(FakeUnitOfWork(ledger)).handle(
            MovementFilter(kind=MovementKind.OUT)
        )
        assert page.total == 2
        assert all(m.kind == "OUT" for m in page.items)
        assert all(m.delta < 0 for m in page.items)

    def test_filter_by_reference(self, ledger):
        page = ListMovementsHandler(FakeUnitOfWork(ledger)).handle(
            MovementFilter(reference_type=ReferenceType.ORDER, reference_id="1")
        )
        assert sorted(m.kind for m in page.items) == ["OUT", "RETURN"]
        assert page.items[0].reference == "ORDER:1"

    def test_date_range_and_pagination(self, ledger):
        now = datetime.now(timezone.utc)
        handler = ListMovementsHandler(FakeUnitOfWork(ledger))

        page = handler.handle(MovementFilter(date_from=now - timedelta(hours=1)), page=2, limit=3)
        assert page.total == 4
        assert page.total_pages == 2
        assert len(page.items) == 1

        future = handler.handle(MovementFilter(date_from=now + timedelta(hours=1)))
        assert future.total == 0

    def test_statistics(self, ledger):
        stats = MovementStatisticsHandler(FakeUnitOfWork(ledger)).handle()
        assert stats == {
            "IN": 1,
            "OUT": 2,
            "ADJUST": 0,
            "TRANSFER": 0,
            "RETURN": 1,
            "TOTAL": 4,
        }

    def test_ledger_balances_with_store(self, ledger):
        balance = LedgerBalanceHandler(FakeUnitOfWork(ledger)).handle(3)
        # seeded 50 before any movement existed
        assert balance.ledger_net == 9
        assert balance.quantity == 59


class TestCatalogSeeding:

    def test_add_product_starts_at_zero(self):
        db = FakeDatabase()
        product = AddProductHandler(FakeUnitOfWork(db)).handle(
            sku="W-1", name="Widget", sale_price="15.00", unit_cost="9.00", min_threshold=3
        )
        assert product.id == 1
        assert db.level(product.id).quantity == 0

    def test_duplicate_sku_rejected(self):
        db = FakeDatabase()
        handler = AddProductHandler(FakeUnitOfWork(db))
        handler.handle(sku="W-1", name="Widget", sale_price="15.00")
        with pytest.raises(ValidationError, match="already exists"):
            handler.handle(sku="W-1", name="Other", sale_price="1.00")

    def test_threshold_bounds(self):
        with pytest.raises(ValidationError, match="below min"):
            AddProductHandler(FakeUnitOfWork()).handle(
                sku="W-1", name="Widget", sale_price="1", min_threshold=5, max_threshold=2
            )

    def test_add_warehouse(self):
        db = FakeDatabase()
        warehouse = AddWarehouseHandler(FakeUnitOfWork(db)).handle(code="EAST", name="East")
        assert db.warehouses[warehouse.id].code == "EAST"
        with pytest.raises(ValidationError):
            AddWarehouseHandler(FakeUnitOfWork(db)).handle(code="EAST", name="Again")
