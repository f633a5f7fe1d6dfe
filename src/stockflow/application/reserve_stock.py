"""Application service: Reserve / Release Stock use cases.

Used by quotes: accepting a quote holds its units, expiry or rejection
releases them.  Every line of one request is held (or released) in one
transaction.
"""

from __future__ import annotations

import logging

from stockflow.application.dto import StockLevelDTO, level_to_dto
from stockflow.application.lookups import (
    require_active_product,
    require_product,
    require_scope,
)
from stockflow.domain.exceptions import ValidationError
from stockflow.domain.repository.unit_of_work import UnitOfWork
from stockflow.domain.service.reservation_manager import ReservationManager

logger = logging.getLogger(__name__)


class ReserveStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        quantities: dict[int, int],
        warehouse_id: int | None = None,
        reference: str | None = None,
    ) -> list[StockLevelDTO]:
        """Reserve ``{product_id: quantity}``; all lines or none."""
        if not quantities:
            raise ValidationError("Nothing to reserve")

        with self._uow as uow:
            require_scope(uow, warehouse_id)
            names = {pid: require_active_product(uow, pid).name for pid in quantities}
            levels = ReservationManager(uow).reserve_lines(quantities, warehouse_id)
            uow.commit()

        logger.info(
            "Reserved %s in %s (ref=%s)",
            quantities, _scope(warehouse_id), reference or "-",
        )
        return [level_to_dto(level, names[level.product_id]) for level in levels]


class ReleaseStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        quantities: dict[int, int],
        warehouse_id: int | None = None,
        reference: str | None = None,
    ) -> list[StockLevelDTO]:
        """Release ``{product_id: quantity}``; all lines or none."""
        if not quantities:
            raise ValidationError("Nothing to release")

        with self._uow as uow:
            require_scope(uow, warehouse_id)
            names = {pid: require_product(uow, pid).name for pid in quantities}
            levels = ReservationManager(uow).release_lines(quantities, warehouse_id)
            uow.commit()

        logger.info(
            "Released %s in %s (ref=%s)",
            quantities, _scope(warehouse_id), reference or "-",
        )
        return [level_to_dto(level, names[level.product_id]) for level in levels]


def _scope(warehouse_id: int | None) -> str:
    return "global stock" if warehouse_id is None else f"warehouse #{warehouse_id}"
