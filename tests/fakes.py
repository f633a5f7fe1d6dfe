"""In-memory fakes for testing.

These implement the same abstract interfaces as the SQL repositories but
keep everything in dicts on one ``FakeDatabase``.  ``FakeUnitOfWork``
snapshots the database on ``__enter__`` and restores it on rollback, so
tests observe the same all-or-nothing behaviour as a real transaction.
"""

from __future__ import annotations

import copy
from dataclasses import replace

from stockflow.domain.model.alert import LowStockAlert
from stockflow.domain.model.inventory import StockLevel, StockOutcome, StockUpdate
from stockflow.domain.model.movement import MovementKind, StockMovement
from stockflow.domain.model.order import Order, OrderStatus
from stockflow.domain.model.product import Product, Warehouse
from stockflow.domain.model.value_objects import Money
from stockflow.domain.repository.alert_outbox import AlertOutbox
from stockflow.domain.repository.movement_repository import (
    MovementFilter,
    MovementRepository,
)
from stockflow.domain.repository.order_repository import OrderRepository
from stockflow.domain.repository.page import Page, normalize
from stockflow.domain.repository.product_repository import (
    ProductRepository,
    WarehouseRepository,
)
from stockflow.domain.repository.stock_store import StockStore
from stockflow.domain.repository.unit_of_work import UnitOfWork

_TABLES = (
    "products",
    "warehouses",
    "orders",
    "movements",
    "global_levels",
    "warehouse_levels",
    "sequences",
)


class FakeDatabase:

    def __init__(self) -> None:
        self.products: dict[int, Product] = {}
        self.warehouses: dict[int, Warehouse] = {}
        self.orders: dict[int, Order] = {}
        self.movements: list[StockMovement] = []
        self.global_levels: dict[int, StockLevel] = {}
        self.warehouse_levels: dict[tuple[int, int], StockLevel] = {}
        self.sequences: dict[str, int] = {}
        # products whose next guarded decrement loses a simulated race
        self.force_conflict: set[int] = set()

    def next_id(self, table: str) -> int:
        self.sequences[table] = self.sequences.get(table, 0) + 1
        return self.sequences[table]

    def snapshot(self) -> dict:
        return {name: copy.deepcopy(getattr(self, name)) for name in _TABLES}

    def restore(self, snapshot: dict) -> None:
        for name, value in snapshot.items():
            setattr(self, name, copy.deepcopy(value))

    # --- Seeding helpers ------------------------------------------------------

    def seed_product(
        self,
        name: str = "Widget",
        price: str = "15.00",
        cost: str = "9.00",
        quantity: int = 0,
        min_threshold: int = 0,
        max_threshold: int | None = None,
        active: bool = True,
    ) -> Product:
        product_id = self.next_id("products")
        product = Product(
            id=product_id,
            sku=f"SKU-{product_id:03d}",
            name=name,
            sale_price=Money.of(price),
            unit_cost=Money.of(cost),
            min_threshold=min_threshold,
            max_threshold=max_threshold,
            active=active,
        )
        self.products[product_id] = product
        self.global_levels[product_id] = StockLevel(product_id, None, quantity)
        return product

    def seed_warehouse(self, code: str = "MAIN", active: bool = True) -> Warehouse:
        warehouse_id = self.next_id("warehouses")
        warehouse = Warehouse(id=warehouse_id, name=code.title(), code=code, active=active)
        self.warehouses[warehouse_id] = warehouse
        return warehouse

    def seed_stock(
        self, product_id: int, warehouse_id: int, quantity: int, reserved: int = 0
    ) -> None:
        self.warehouse_levels[(product_id, warehouse_id)] = StockLevel(
            product_id, warehouse_id, quantity, reserved
        )

    def level(self, product_id: int, warehouse_id: int | None = None) -> StockLevel | None:
        if warehouse_id is None:
            return self.global_levels.get(product_id)
        return self.warehouse_levels.get((product_id, warehouse_id))


class FakeProductRepository(ProductRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, product_id: int) -> Product | None:
        return self._db.products.get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        for p in self._db.products.values():
            if p.sku == sku:
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._db.products.values())

    def add(self, product: Product) -> Product:
        product.id = self._db.next_id("products")
        self._db.products[product.id] = product
        self._db.global_levels[product.id] = StockLevel(product.id, None, 0)
        return product


class FakeWarehouseRepository(WarehouseRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, warehouse_id: int) -> Warehouse | None:
        return self._db.warehouses.get(warehouse_id)

    def get_by_code(self, code: str) -> Warehouse | None:
        for w in self._db.warehouses.values():
            if w.code == code:
                return w
        return None

    def list_all(self) -> list[Warehouse]:
        return list(self._db.warehouses.values())

    def add(self, warehouse: Warehouse) -> Warehouse:
        warehouse.id = self._db.next_id("warehouses")
        self._db.warehouses[warehouse.id] = warehouse
        return warehouse


class FakeOrderRepository(OrderRepository):
    """Stores copies so in-flight mutations only land through the API."""

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, order_id: int) -> Order | None:
        order = self._db.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    def add(self, order: Order) -> Order:
        order.id = self._db.next_id("orders")
        order.number = f"CMD-{order.id:06d}"
        self._db.orders[order.id] = copy.deepcopy(order)
        return order

    def save_status(self, order: Order, expected: OrderStatus) -> bool:
        stored = self._db.orders.get(order.id)
        if stored is None or stored.status is not expected:
            return False
        stored.status = order.status
        return True

    def list(
        self,
        status: OrderStatus | None = None,
        client_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[Order]:
        page, limit = normalize(page, limit)
        orders = [
            o
            for o in self._db.orders.values()
            if (status is None or o.status is status)
            and (client_id is None or o.client_id == client_id)
        ]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        start = (page - 1) * limit
        return Page(
            items=copy.deepcopy(orders[start:start + limit]),
            total=len(orders),
            page=page,
            limit=limit,
        )


class FakeMovementRepository(MovementRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def append(self, movement: StockMovement) -> StockMovement:
        stored = replace(movement, id=self._db.next_id("movements"))
        self._db.movements.append(stored)
        return stored

    def list(
        self,
        criteria: MovementFilter | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[StockMovement]:
        page, limit = normalize(page, limit)
        c = criteria or MovementFilter()
        rows = [
            m
            for m in self._db.movements
            if (c.product_id is None or m.product_id == c.product_id)
            and (c.warehouse_id is None or m.warehouse_id == c.warehouse_id)
            and (c.kind is None or m.kind is c.kind)
            and (c.reference_type is None or m.reference_type is c.reference_type)
            and (c.reference_id is None or m.reference_id == c.reference_id)
            and (c.date_from is None or m.created_at >= c.date_from)
            and (c.date_to is None or m.created_at <= c.date_to)
        ]
        rows.sort(key=lambda m: (m.created_at, m.id), reverse=True)
        start = (page - 1) * limit
        return Page(items=rows[start:start + limit], total=len(rows), page=page, limit=limit)

    def count_by_kind(self) -> dict[MovementKind, int]:
        counts = {kind: 0 for kind in MovementKind}
        for m in self._db.movements:
            counts[m.kind] += 1
        return counts

    def net_change(self, product_id: int, warehouse_id: int | None) -> int:
        return sum(
            m.delta
            for m in self._db.movements
            if m.product_id == product_id and m.warehouse_id == warehouse_id
        )


class FakeStockStore(StockStore):
    """Applies the same guards as the SQL statements, on a dict of levels."""

    def __init__(self, db: FakeDatabase, per_warehouse: bool) -> None:
        self._db = db
        self._per_warehouse = per_warehouse

    @property
    def _rows(self) -> dict:
        return self._db.warehouse_levels if self._per_warehouse else self._db.global_levels

    def _key(self, product_id: int, warehouse_id: int | None):
        if self._per_warehouse:
            assert warehouse_id is not None
            return (product_id, warehouse_id)
        assert warehouse_id is None
        return product_id

    def get_level(self, product_id: int, warehouse_id: int | None) -> StockLevel | None:
        return self._rows.get(self._key(product_id, warehouse_id))

    def list_levels(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
    ) -> list[StockLevel]:
        if not self._per_warehouse and warehouse_id is not None:
            return []
        return [
            level
            for level in self._rows.values()
            if (product_id is None or level.product_id == product_id)
            and (warehouse_id is None or level.warehouse_id == warehouse_id)
        ]

    def conditional_decrement(
        self, product_id: int, warehouse_id: int | None, amount: int
    ) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        if product_id in self._db.force_conflict or level.available < amount:
            return StockUpdate(StockOutcome.CONFLICT, level)
        return self._store(replace(level, quantity=level.quantity - amount), -amount)

    def increment(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            if not self._per_warehouse:
                return StockUpdate(StockOutcome.MISSING)
            level = StockLevel(product_id, warehouse_id, 0)
        return self._store(replace(level, quantity=level.quantity + amount), amount)

    def adjust_absolute(
        self, product_id: int, warehouse_id: int | None, new_quantity: int
    ) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        if new_quantity < level.reserved:
            return StockUpdate(StockOutcome.REFUSED, level)
        return self._store(replace(level, quantity=new_quantity), new_quantity - level.quantity)

    def reserve(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        if amount > level.available:
            return StockUpdate(StockOutcome.REFUSED, level)
        return self._store(replace(level, reserved=level.reserved + amount), 0)

    def release(self, product_id: int, warehouse_id: int | None, amount: int) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        if amount > level.reserved:
            return StockUpdate(StockOutcome.REFUSED, level)
        return self._store(replace(level, reserved=level.reserved - amount), 0)

    def remove(self, product_id: int, warehouse_id: int | None) -> StockUpdate:
        level = self.get_level(product_id, warehouse_id)
        if level is None:
            return StockUpdate(StockOutcome.MISSING)
        if not self._per_warehouse or level.reserved > 0:
            return StockUpdate(StockOutcome.REFUSED, level)
        del self._rows[self._key(product_id, warehouse_id)]
        return StockUpdate(StockOutcome.APPLIED, level, delta=-level.quantity)

    def _store(self, level: StockLevel, delta: int) -> StockUpdate:
        self._rows[self._key(level.product_id, level.warehouse_id)] = level
        return StockUpdate(StockOutcome.APPLIED, level, delta=delta)


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, db: FakeDatabase | None = None) -> None:
        self.db = db or FakeDatabase()
        self.products = FakeProductRepository(self.db)
        self.warehouses = FakeWarehouseRepository(self.db)
        self.orders = FakeOrderRepository(self.db)
        self.movements = FakeMovementRepository(self.db)
        self.global_stock = FakeStockStore(self.db, per_warehouse=False)
        self.warehouse_stock = FakeStockStore(self.db, per_warehouse=True)
        self.commits = 0
        self._snapshot: dict | None = None

    def __enter__(self) -> FakeUnitOfWork:
        self._snapshot = self.db.snapshot()
        return self

    def commit(self) -> None:
        self._snapshot = self.db.snapshot()
        self.commits += 1

    def rollback(self) -> None:
        if self._snapshot is not None:
            self.db.restore(self._snapshot)


class RecordingOutbox(AlertOutbox):

    def __init__(self) -> None:
        self.alerts: list[LowStockAlert] = []

    def put(self, alert: LowStockAlert) -> None:
        self.alerts.append(alert)


class FailingOutbox(AlertOutbox):

    def __init__(self) -> None:
        self.attempts = 0

    def put(self, alert: LowStockAlert) -> None:
        self.attempts += 1
        raise ConnectionError("notification service unavailable")
