"""In-process alert outbox backed by a bounded ``queue.Queue``."""

from __future__ import annotations

import logging
import queue

from stockflow.domain.model.alert import LowStockAlert
from stockflow.domain.repository.alert_outbox import AlertOutbox

logger = logging.getLogger(__name__)


class QueueAlertOutbox(AlertOutbox):
    """Never blocks the caller; alerts beyond ``maxsize`` are dropped."""

    def __init__(self, maxsize: int = 1000) -> None:
        self._queue: queue.Queue[LowStockAlert] = queue.Queue(maxsize=maxsize)

    def put(self, alert: LowStockAlert) -> None:
        try:
            self._queue.put_nowait(alert)
        except queue.Full:
            logger.warning(
                "Alert outbox full; dropping low-stock alert for product #%s",
                alert.product_id,
            )

    def take(self) -> LowStockAlert | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()
