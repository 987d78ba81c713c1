"""Engine and session factory setup.

SQLite gets two adjustments on every connection: foreign keys are
enforced, and pysqlite's implicit transaction handling is replaced by an
explicit ``BEGIN`` so SAVEPOINT-based test isolation actually rolls back.
In-memory URLs share one connection through ``StaticPool``; otherwise each
connection would see its own empty database.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return False
    return parsed.database in (None, "", ":memory:")


def create_db_engine(url: str, *, echo: bool = False, foreign_keys: bool = True) -> Engine:
    """Create an engine for *url* with SQLite test-friendly settings."""
    kwargs: dict[str, Any] = {"echo": echo}
    if _is_memory_sqlite(url):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_engine(url, **kwargs)
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        if foreign_keys:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN")

    logger.debug("Created SQLite engine for %s", engine.url)
    return engine


def create_session_factory(bind: Engine | Connection, **kwargs: Any) -> sessionmaker[Session]:
    """Session factory whose objects stay readable after commit."""
    kwargs.setdefault("expire_on_commit", False)
    return sessionmaker(bind=bind, **kwargs)


def create_schema(engine: Engine, metadata: MetaData) -> None:
    """Create every table of *metadata*. Existing tables are left alone."""
    metadata.create_all(engine)
    logger.debug("Created schema with %d table(s)", len(metadata.tables))
