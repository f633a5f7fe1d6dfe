"""Delivery of queued low-stock alerts.

The dispatcher owns no thread; whoever owns the process calls ``drain()``
(the CLI does so after each command).  A failing sink is logged and the
remaining alerts are still delivered.
"""

from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from stockflow.domain.model.alert import LowStockAlert
from stockflow.infrastructure.notifications.queue_outbox import QueueAlertOutbox

logger = logging.getLogger(__name__)

EVENT_TYPE = "LOW_STOCK"


def to_event(alert: LowStockAlert) -> dict:
    return {
        "type": EVENT_TYPE,
        "eventId": str(uuid.uuid4()),
        "createdAt": datetime.now(timezone.utc).isoformat(),
        **alert.to_dict(),
    }


class AlertSink(ABC):

    @abstractmethod
    def deliver(self, alert: LowStockAlert) -> None:
        """Send one alert; may raise on transport failure."""


class LoggingAlertSink(AlertSink):
    """Writes each alert as a JSON event on the ``stockflow.alerts`` logger."""

    def __init__(self, logger_name: str = "stockflow.alerts") -> None:
        self._logger = logging.getLogger(logger_name)

    def deliver(self, alert: LowStockAlert) -> None:
        self._logger.warning(json.dumps(to_event(alert)))


class AlertDispatcher:

    def __init__(self, outbox: QueueAlertOutbox, sink: AlertSink) -> None:
        self._outbox = outbox
        self._sink = sink

    def drain(self) -> int:
        """Deliver everything queued so far; returns the number delivered."""
        delivered = 0
        while (alert := self._outbox.take()) is not None:
            try:
                self._sink.deliver(alert)
            except Exception:
                logger.exception(
                    "Low-stock alert delivery failed for product #%s", alert.product_id
                )
                continue
            delivered += 1
        if delivered:
            logger.info("Delivered %d low-stock alert(s)", delivered)
        return delivered
