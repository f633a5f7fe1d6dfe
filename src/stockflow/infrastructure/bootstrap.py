"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Nothing here is a
module-level singleton: ``build()`` returns a container the caller owns
and closes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stockflow.infrastructure.config import Settings
from stockflow.infrastructure.notifications.dispatcher import (
    AlertDispatcher,
    AlertSink,
    LoggingAlertSink,
)
from stockflow.infrastructure.notifications.queue_outbox import QueueAlertOutbox
from stockflow.infrastructure.persistence.database import Database
from stockflow.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    database: Database
    outbox: QueueAlertOutbox
    dispatcher: AlertDispatcher

    def unit_of_work(self) -> SqlUnitOfWork:
        """A fresh unit of work; build one per handler (and per thread)."""
        return SqlUnitOfWork(self.database.session_factory)

    def close(self) -> None:
        pending = len(self.outbox)
        if pending:
            logger.info("Flushing %d pending low-stock alert(s)", pending)
            self.dispatcher.drain()
        self.database.close()


def build(settings: Settings | None = None, sink: AlertSink | None = None) -> Container:
    settings = settings or Settings()
    database = Database(settings).open()
    outbox = QueueAlertOutbox(maxsize=settings.alert_queue_size)
    dispatcher = AlertDispatcher(outbox, sink or LoggingAlertSink())
    return Container(
        settings=settings,
        database=database,
        outbox=outbox,
        dispatcher=dispatcher,
    )
