"""SQLAlchemy Unit of Work: one session, one transaction per ``with`` block."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from stockflow.domain.repository.unit_of_work import UnitOfWork
from stockflow.infrastructure.persistence.sql_movement_repository import (
    SqlMovementRepository,
)
from stockflow.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from stockflow.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
    SqlWarehouseRepository,
)
from stockflow.infrastructure.persistence.sql_stock_store import (
    SqlGlobalStockStore,
    SqlWarehouseStockStore,
)


class SqlUnitOfWork(UnitOfWork):
    """Not shared between threads: each worker builds its own instance."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        if self._session is not None:
            raise RuntimeError("Unit of work is already in use")
        session = self._session_factory()
        self._session = session
        self.products = SqlProductRepository(session)
        self.warehouses = SqlWarehouseRepository(session)
        self.orders = SqlOrderRepository(session)
        self.movements = SqlMovementRepository(session)
        self.global_stock = SqlGlobalStockStore(session)
        self.warehouse_stock = SqlWarehouseStockStore(session)
        return self

    def __exit__(self, *args) -> None:
        try:
            super().__exit__(*args)
        finally:
            if self._session is not None:
                self._session.close()
            self._session = None

    def commit(self) -> None:
        self._require_session().commit()

    def rollback(self) -> None:
        self._require_session().rollback()

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work used outside a 'with' block")
        return self._session
