"""Alembic runtime entry point for the groupcart revisions.

Online runs go through :func:`create_db_engine`, so migrations see the same
PRAGMAs and explicit ``BEGIN`` handling as the store itself.
"""

from __future__ import annotations

from alembic import context

from groupcart.infrastructure.database.engine import create_db_engine, is_sqlite
from groupcart.infrastructure.database.schema import metadata

target_metadata = metadata


def _url() -> str:
    url = context.config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("sqlalchemy.url is not set on the Alembic config")
    return url


def run_migrations_offline() -> None:
    """Emit the migration SQL instead of executing it."""
    context.configure(
        url=_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _url()
    engine = create_db_engine(url)
    try:
        with engine.connect() as connection:
            # SQLite cannot ALTER most column properties; batch mode rebuilds tables.
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=is_sqlite(url),
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
