"""Outbound channel for low-stock alerts.

Handlers put alerts here only after their stock transaction has committed;
delivery happens later and its failures never reach the handler.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.alert import LowStockAlert


class AlertOutbox(ABC):

    @abstractmethod
    def put(self, alert: LowStockAlert) -> None:
        """Enqueue an alert without waiting for delivery."""
