"""Engine and session factory with an explicit open/close lifecycle.

There is no module-level engine: the composition root opens one
``Database`` per process (or per test) and hands its session factory to
the units of work.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stockflow.infrastructure.config import Settings
from stockflow.infrastructure.persistence.tables import Base

logger = logging.getLogger(__name__)


class Database:

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    # --- Lifecycle ------------------------------------------------------------

    def open(self) -> Database:
        if self._engine is not None:
            return self
        url = make_url(self._settings.database_url)
        if url.get_backend_name() == "sqlite":
            engine = self._sqlite_engine(url)
        else:
            engine = create_engine(
                url, echo=self._settings.echo_sql, pool_pre_ping=True
            )

        Base.metadata.create_all(bind=engine)
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
        logger.info("Database opened at %s", url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.debug("Database closed")

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, *args) -> None:
        self.close()

    # --- Accessors ------------------------------------------------------------

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory

    # --- SQLite ---------------------------------------------------------------

    def _sqlite_engine(self, url) -> Engine:
        database = url.database
        in_memory = not database or database == ":memory:"
        if not in_memory:
            Path(database).parent.mkdir(parents=True, exist_ok=True)

        options: dict = {
            "echo": self._settings.echo_sql,
            "connect_args": {
                "timeout": self._settings.sqlite_busy_timeout,
                "check_same_thread": False,
            },
        }
        if in_memory:
            options["poolclass"] = StaticPool
        engine = create_engine(url, **options)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record) -> None:
            # let SQLAlchemy emit BEGIN itself (see _on_begin)
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn) -> None:
            # take the write lock up front; waiters queue on the busy timeout
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine
