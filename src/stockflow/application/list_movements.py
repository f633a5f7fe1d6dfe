"""Application service: Stock Ledger queries."""

from __future__ import annotations

from dataclasses import dataclass

from stockflow.application.dto import MovementDTO, movement_to_dto
from stockflow.application.lookups import require_product
from stockflow.domain.model.movement import MovementKind
from stockflow.domain.repository.movement_repository import MovementFilter
from stockflow.domain.repository.page import Page
from stockflow.domain.repository.unit_of_work import UnitOfWork


class ListMovementsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        criteria: MovementFilter | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[MovementDTO]:
        with self._uow as uow:
            result = uow.movements.list(criteria, page=page, limit=limit)
        return Page(
            items=[movement_to_dto(m) for m in result.items],
            total=result.total,
            page=result.page,
            limit=result.limit,
        )


class MovementStatisticsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> dict[str, int]:
        """Movement counts per kind plus the overall total."""
        with self._uow as uow:
            counts = uow.movements.count_by_kind()
        stats = {kind.value: counts.get(kind, 0) for kind in MovementKind}
        stats["TOTAL"] = sum(counts.values())
        return stats


@dataclass(frozen=True)
class LedgerBalanceDTO:
    product_id: int
    warehouse_id: int | None
    ledger_net: int
    quantity: int


class LedgerBalanceHandler:
    """Sum of ledger deltas next to the stored quantity, for reconciliation.

    The two match whenever every quantity change went through the
    handlers and the row started from zero.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, warehouse_id: int | None = None) -> LedgerBalanceDTO:
        with self._uow as uow:
            require_product(uow, product_id)
            net = uow.movements.net_change(product_id, warehouse_id)
            level = uow.stock_for(warehouse_id).get_level(product_id, warehouse_id)
        return LedgerBalanceDTO(
            product_id=product_id,
            warehouse_id=warehouse_id,
            ledger_net=net,
            quantity=level.quantity if level else 0,
        )
