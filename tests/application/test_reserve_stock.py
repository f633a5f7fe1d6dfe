"""Integration tests for reservations held against quotes."""

from dataclasses import replace

import pytest

from stockflow.application.create_order import CreateOrderHandler
from stockflow.application.dto import OrderLineRequest
from stockflow.application.reserve_stock import ReleaseStockHandler, ReserveStockHandler
from stockflow.domain.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    ValidationError,
)
from tests.fakes import FakeDatabase, FakeUnitOfWork, RecordingOutbox


@pytest.fixture
def db() -> FakeDatabase:
    db = FakeDatabase()
    db.seed_product("Widget", quantity=10)
    db.seed_product("Gadget", quantity=3)
    return db


class TestReserveStock:

    def test_reserve_holds_units_without_ledger_rows(self, db):
        levels = ReserveStockHandler(FakeUnitOfWork(db)).handle({1: 4, 2: 1}, reference="Q-1")

        assert [(lv.product_name, lv.reserved, lv.available) for lv in levels] == [
            ("Widget", 4, 6),
            ("Gadget", 1, 2),
        ]
        assert db.movements == []

    def test_all_or_nothing(self, db):
        with pytest.raises(InsufficientStockError, match="Gadget"):
            ReserveStockHandler(FakeUnitOfWork(db)).handle({1: 4, 2: 5})
        assert db.level(1).reserved == 0

    def test_empty_request(self, db):
        with pytest.raises(ValidationError):
            ReserveStockHandler(FakeUnitOfWork(db)).handle({})

    def test_reserved_units_block_orders(self, db):
        ReserveStockHandler(FakeUnitOfWork(db)).handle({1: 8})
        orders = CreateOrderHandler(FakeUnitOfWork(db), RecordingOutbox())

        with pytest.raises(InsufficientStockError, match="have 2 available"):
            orders.handle([OrderLineRequest(1, 3)])

        orders.handle([OrderLineRequest(1, 2)])
        assert db.level(1).quantity == 8
        assert db.level(1).reserved == 8


class TestReleaseStock:

    def test_release(self, db):
        ReserveStockHandler(FakeUnitOfWork(db)).handle({1: 4})
        levels = ReleaseStockHandler(FakeUnitOfWork(db)).handle({1: 4})
        assert levels[0].reserved == 0
        assert levels[0].available == 10

    def test_over_release_rolls_back_all_lines(self, db):
        ReserveStockHandler(FakeUnitOfWork(db)).handle({1: 4, 2: 1})

        with pytest.raises(InvalidStateError, match="only 1 currently reserved"):
            ReleaseStockHandler(FakeUnitOfWork(db)).handle({1: 4, 2: 2})

        assert db.level(1).reserved == 4
        assert db.level(2).reserved == 1


class TestInactiveProduct:

    def test_reserve_refused_but_release_allowed(self, db):
        ReserveStockHandler(FakeUnitOfWork(db)).handle({2: 2})
        db.products[2] = replace(db.products[2], active=False)

        with pytest.raises(InvalidStateError, match="inactive"):
            ReserveStockHandler(FakeUnitOfWork(db)).handle({2: 1})

        levels = ReleaseStockHandler(FakeUnitOfWork(db)).handle({2: 2})
        assert levels[0].reserved == 0
