"""SQLAlchemy-backed stock ledger (append-only)."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from stockflow.domain.model.movement import MovementKind, StockMovement
from stockflow.domain.model.value_objects import Money
from stockflow.domain.repository.movement_repository import (
    MovementFilter,
    MovementRepository,
)
from stockflow.domain.repository.page import Page, normalize
from stockflow.infrastructure.persistence.tables import MovementRow, as_utc


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


class SqlMovementRepository(MovementRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- MovementRepository interface -----------------------------------------

    def append(self, movement: StockMovement) -> StockMovement:
        row = MovementRow(
            product_id=movement.product_id,
            warehouse_id=movement.warehouse_id,
            kind=movement.kind,
            quantity=movement.quantity,
            reason=movement.reason,
            reference_type=movement.reference_type,
            reference_id=movement.reference_id,
            unit_cost=movement.unit_cost.amount if movement.unit_cost else None,
            actor_id=movement.actor_id,
            created_at=_utc(movement.created_at),
        )
        self._session.add(row)
        self._session.flush()
        return self._to_domain(row)

    def list(
        self,
        criteria: MovementFilter | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[StockMovement]:
        page, limit = normalize(page, limit)
        stmt = self._filtered(select(MovementRow), criteria or MovementFilter())

        total = self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        ) or 0
        rows = self._session.scalars(
            stmt.order_by(MovementRow.created_at.desc(), MovementRow.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return Page(
            items=[self._to_domain(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    def count_by_kind(self) -> dict[MovementKind, int]:
        counts = {kind: 0 for kind in MovementKind}
        rows = self._session.execute(
            select(MovementRow.kind, func.count()).group_by(MovementRow.kind)
        )
        for kind, count in rows:
            counts[kind] = count
        return counts

    def net_change(self, product_id: int, warehouse_id: int | None) -> int:
        signed = case(
            (MovementRow.kind == MovementKind.OUT, -MovementRow.quantity),
            else_=MovementRow.quantity,
        )
        stmt = select(func.coalesce(func.sum(signed), 0)).where(
            MovementRow.product_id == product_id
        )
        if warehouse_id is None:
            stmt = stmt.where(MovementRow.warehouse_id.is_(None))
        else:
            stmt = stmt.where(MovementRow.warehouse_id == warehouse_id)
        return int(self._session.scalar(stmt) or 0)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _filtered(stmt, criteria: MovementFilter):
        if criteria.product_id is not None:
            stmt = stmt.where(MovementRow.product_id == criteria.product_id)
        if criteria.warehouse_id is not None:
            stmt = stmt.where(MovementRow.warehouse_id == criteria.warehouse_id)
        if criteria.kind is not None:
            stmt = stmt.where(MovementRow.kind == criteria.kind)
        if criteria.reference_type is not None:
            stmt = stmt.where(MovementRow.reference_type == criteria.reference_type)
        if criteria.reference_id is not None:
            stmt = stmt.where(MovementRow.reference_id == criteria.reference_id)
        if criteria.date_from is not None:
            stmt = stmt.where(MovementRow.created_at >= _utc(criteria.date_from))
        if criteria.date_to is not None:
            stmt = stmt.where(MovementRow.created_at <= _utc(criteria.date_to))
        return stmt

    @staticmethod
    def _to_domain(row: MovementRow) -> StockMovement:
        return StockMovement(
            id=row.id,
            product_id=row.product_id,
            warehouse_id=row.warehouse_id,
            kind=row.kind,
            quantity=row.quantity,
            reason=row.reason,
            reference_type=row.reference_type,
            reference_id=row.reference_id,
            unit_cost=Money(Decimal(row.unit_cost)) if row.unit_cost is not None else None,
            actor_id=row.actor_id,
            created_at=as_utc(row.created_at),
        )
