"""Application service: Show / List Orders use cases (queries)."""

from __future__ import annotations

from stockflow.application.advance_order import parse_status
from stockflow.application.dto import OrderDTO, order_to_dto
from stockflow.domain.exceptions import EntityNotFoundError
from stockflow.domain.repository.page import Page
from stockflow.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        status: str | None = None,
        client_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[OrderDTO]:
        with self._uow as uow:
            result = uow.orders.list(
                status=parse_status(status) if status else None,
                client_id=client_id,
                page=page,
                limit=limit,
            )
        return Page(
            items=[order_to_dto(o) for o in result.items],
            total=result.total,
            page=result.page,
            limit=result.limit,
        )
