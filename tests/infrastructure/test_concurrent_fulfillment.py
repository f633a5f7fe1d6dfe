"""Concurrent fulfillment against one SQLite file.

Every worker builds its own handler and unit of work; the only shared
thing is the database.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from stockflow.application.create_order import CreateOrderHandler
from stockflow.application.dto import OrderLineRequest
from stockflow.application.receive_stock import ReceiveStockHandler
from stockflow.domain.exceptions import InsufficientStockError, WriteConflictError
from stockflow.domain.model.movement import MovementKind
from stockflow.domain.repository.movement_repository import MovementFilter
from tests.fakes import RecordingOutbox


def _place_one(uow_factory, product_id: int, warehouse_id: int | None):
    handler = CreateOrderHandler(uow_factory(), RecordingOutbox())
    try:
        return handler.handle([OrderLineRequest(product_id, 1)], warehouse_id=warehouse_id)
    except (InsufficientStockError, WriteConflictError) as exc:
        return exc


@pytest.mark.parametrize("use_warehouse", [False, True], ids=["global", "warehouse"])
def test_six_orders_against_five_units(uow_factory, widget, warehouse, use_warehouse):
    warehouse_id = warehouse.id if use_warehouse else None
    ReceiveStockHandler(uow_factory()).handle(widget.id, 5, warehouse_id=warehouse_id)

    with ThreadPoolExecutor(max_workers=6) as pool:
        futures = [
            pool.submit(_place_one, uow_factory, widget.id, warehouse_id) for _ in range(6)
        ]
        results = [f.result() for f in futures]

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(results) - len(failures) == 5
    assert len(failures) == 1
    assert isinstance(failures[0], (InsufficientStockError, WriteConflictError))

    with uow_factory() as uow:
        level = uow.stock_for(warehouse_id).get_level(widget.id, warehouse_id)
        outs = uow.movements.list(MovementFilter(kind=MovementKind.OUT))
        orders = uow.orders.list()
    assert level.quantity == 0
    assert outs.total == 5
    assert orders.total == 5
