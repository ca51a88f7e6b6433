"""Database engine setup.

SQLite is the default persistence layer: WAL mode so readers never block
the writer, foreign keys enforced, and explicit ``BEGIN`` control so write
transactions take the database lock up front (``BEGIN IMMEDIATE``). That
makes every check-then-insert sequence serializable against concurrent
writers. Any other SQLAlchemy URL (e.g. PostgreSQL) is accepted as-is and
relies on its own isolation level plus the schema's constraints.

SQLAlchemy Core (not ORM) is used throughout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url

from groupcart.infrastructure.database.schema import metadata

# Execution option read by the SQLite ``begin`` hook.
BEGIN_MODE_OPTION = "groupcart_begin_mode"


def is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def create_db_engine(
    url: str,
    *,
    echo: bool = False,
    busy_timeout_ms: int = 5000,
    isolation_level: str | None = None,
) -> Engine:
    """Create an engine for *url*.

    For SQLite, pysqlite's implicit transaction handling is switched off and
    replaced with an explicit ``BEGIN <mode>`` emitted from the ``begin``
    event, where the mode comes from the connection's
    ``groupcart_begin_mode`` execution option (``DEFERRED`` if unset).
    """
    if not is_sqlite(url):
        kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        if isolation_level:
            kwargs["isolation_level"] = isolation_level
        return create_engine(url, **kwargs)

    engine = create_engine(
        url,
        echo=echo,
        connect_args={"timeout": busy_timeout_ms / 1000, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        mode = conn.get_execution_options().get(BEGIN_MODE_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")

    return engine


def init_database(
    url: str,
    *,
    echo: bool = False,
    busy_timeout_ms: int = 5000,
    isolation_level: str | None = None,
) -> Engine:
    """Create the engine and all tables from :data:`schema.metadata`.

    For file-backed SQLite URLs the parent directory is created first.
    Idempotent — safe to call on an existing database.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(
        url,
        echo=echo,
        busy_timeout_ms=busy_timeout_ms,
        isolation_level=isolation_level,
    )
    metadata.create_all(engine)
    return engine
