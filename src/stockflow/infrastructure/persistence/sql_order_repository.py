"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from stockflow.domain.model.order import Order, OrderLine, OrderStatus
from stockflow.domain.model.value_objects import Money, Quantity
from stockflow.domain.repository.order_repository import OrderRepository
from stockflow.domain.repository.page import Page, normalize
from stockflow.infrastructure.persistence.tables import OrderLineRow, OrderRow, as_utc

ORDER_NUMBER_FORMAT = "CMD-{:06d}"


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.scalar(
            select(OrderRow)
            .where(OrderRow.id == order_id)
            .options(selectinload(OrderRow.lines))
            .execution_options(populate_existing=True)
        )
        return self._to_domain(row) if row else None

    def add(self, order: Order) -> Order:
        total = order.total
        row = OrderRow(
            client_id=order.client_id,
            warehouse_id=order.warehouse_id,
            status=order.status,
            total=total.amount,
            currency=total.currency,
            created_by=order.created_by,
            created_at=order.created_at,
            lines=[
                OrderLineRow(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity.value,
                    unit_price=line.unit_price.amount,
                )
                for line in order.lines
            ],
        )
        self._session.add(row)
        self._session.flush()

        # the number derives from the id, so it needs the INSERT first
        row.number = ORDER_NUMBER_FORMAT.format(row.id)
        self._session.flush()

        order.id = row.id
        order.number = row.number
        return order

    def save_status(self, order: Order, expected: OrderStatus) -> bool:
        result = self._session.execute(
            update(OrderRow)
            .where(OrderRow.id == order.id)
            .where(OrderRow.status == expected)
            .values(status=order.status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list(
        self,
        status: OrderStatus | None = None,
        client_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[Order]:
        page, limit = normalize(page, limit)

        stmt = select(OrderRow)
        if status is not None:
            stmt = stmt.where(OrderRow.status == status)
        if client_id is not None:
            stmt = stmt.where(OrderRow.client_id == client_id)

        total = self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        ) or 0
        rows = self._session.scalars(
            stmt.options(selectinload(OrderRow.lines))
            .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return Page(
            items=[self._to_domain(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        lines = [
            OrderLine(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=Quantity(line.quantity),
                unit_price=Money(Decimal(line.unit_price), row.currency),
            )
            for line in row.lines
        ]
        return Order(
            id=row.id,
            lines=lines,
            warehouse_id=row.warehouse_id,
            client_id=row.client_id,
            status=row.status,
            number=row.number,
            created_by=row.created_by,
            created_at=as_utc(row.created_at),
        )
