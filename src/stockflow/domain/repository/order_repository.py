"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.order import Order, OrderStatus
from stockflow.domain.repository.page import Page


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Insert a new order with its lines; assigns ``id`` and ``number``."""

    @abstractmethod
    def save_status(self, order: Order, expected: OrderStatus) -> bool:
        """Persist ``order.status`` only if the stored status is still *expected*.

        Returns False when another writer changed the status first.
        """

    @abstractmethod
    def list(
        self,
        status: OrderStatus | None = None,
        client_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page[Order]:
        """Return orders, newest first."""
