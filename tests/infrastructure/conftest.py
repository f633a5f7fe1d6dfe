"""Fixtures for tests that run against a real SQLite file.

Each test gets its own database file under ``tmp_path``, so tests that
commit (and the threaded ones) never see each other's rows.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from stockflow.application.add_product import AddProductHandler, AddWarehouseHandler
from stockflow.domain.model.product import Product, Warehouse
from stockflow.infrastructure.config import Settings
from stockflow.infrastructure.persistence.database import Database
from stockflow.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'stockflow.db'}",
        sqlite_busy_timeout=30.0,
        _env_file=None,
    )


@pytest.fixture
def database(settings) -> Iterator[Database]:
    with Database(settings) as db:
        yield db


@pytest.fixture
def uow_factory(database):
    return lambda: SqlUnitOfWork(database.session_factory)


@pytest.fixture
def widget(uow_factory) -> Product:
    return AddProductHandler(uow_factory()).handle(
        sku="W-1", name="Widget", sale_price="15.00", unit_cost="9.00", min_threshold=5
    )


@pytest.fixture
def warehouse(uow_factory) -> Warehouse:
    return AddWarehouseHandler(uow_factory()).handle(code="MAIN", name="Main")
