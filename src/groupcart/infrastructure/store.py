"""Store — the explicit transactional handle passed to every service.

The Store owns the SQLAlchemy engine for its whole lifetime: it is opened
once (at CLI startup or by the caller embedding the service layer) and
closed at shutdown with :meth:`Store.close`. Nothing else holds durable
state.

:meth:`Store.transaction` is the atomic unit for every mutation. On SQLite
it starts with ``BEGIN IMMEDIATE`` so concurrent writers queue on the
database lock instead of interleaving their checks and inserts. Any
exception inside the block rolls back every write made in it.
:meth:`Store.snapshot` opens a deferred read transaction; under WAL mode it
sees one consistent committed state for its whole duration.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, exists, or_, select

from groupcart.infrastructure.database.engine import BEGIN_MODE_OPTION, init_database
from groupcart.infrastructure.database.schema import app_users, favors, list_items, user_groups

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

    from groupcart.config.settings import GroupCartSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StoreTransaction: what transaction() and snapshot() yield
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction with lookup and cascade helpers.

    Helpers never commit; the surrounding ``Store.transaction()`` block
    decides the outcome of everything executed through :attr:`conn`.
    """

    conn: Connection

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_user(self, username: str) -> Row[Any] | None:
        return self.conn.execute(
            select(app_users).where(app_users.c.username == username)
        ).first()

    def find_users(self, usernames: list[str]) -> list[Row[Any]]:
        if not usernames:
            return []
        return list(
            self.conn.execute(
                select(app_users.c.id, app_users.c.username).where(
                    app_users.c.username.in_(usernames)
                )
            ).all()
        )

    def group_exists(self, group_id: str) -> bool:
        return bool(
            self.conn.execute(select(exists().where(user_groups.c.id == group_id))).scalar()
        )

    def find_group(self, group_id: str) -> Row[Any] | None:
        return self.conn.execute(select(user_groups).where(user_groups.c.id == group_id)).first()

    def find_owned_item(self, item_id: int, owner_user_id: int) -> Row[Any] | None:
        """The item with *item_id*, only if *owner_user_id* owns it."""
        return self.conn.execute(
            select(list_items).where(
                list_items.c.id == item_id,
                list_items.c.owner_user_id == owner_user_id,
            )
        ).first()

    def find_favor(self, favor_id: int) -> Row[Any] | None:
        return self.conn.execute(select(favors).where(favors.c.id == favor_id)).first()

    def find_favor_for_item(self, item_id: int) -> Row[Any] | None:
        return self.conn.execute(select(favors).where(favors.c.item_id == item_id)).first()

    # ------------------------------------------------------------------
    # Cascades
    # ------------------------------------------------------------------

    def delete_favors_touching_user(self, user_id: int) -> int:
        """Delete favors on the user's items or given/received by the user.

        One statement, so a favor matching several conditions is counted
        once. Returns the number of rows removed.
        """
        owned_items = select(list_items.c.id).where(list_items.c.owner_user_id == user_id)
        result = self.conn.execute(
            delete(favors).where(
                or_(
                    favors.c.by_user_id == user_id,
                    favors.c.for_user_id == user_id,
                    favors.c.item_id.in_(owned_items),
                )
            )
        )
        return int(result.rowcount or 0)

    def delete_items_of_user(self, user_id: int) -> int:
        result = self.conn.execute(delete(list_items).where(list_items.c.owner_user_id == user_id))
        return int(result.rowcount or 0)

    def delete_user_row(self, user_id: int) -> int:
        result = self.conn.execute(delete(app_users).where(app_users.c.id == user_id))
        return int(result.rowcount or 0)

    def delete_favor_for_item(self, item_id: int) -> int:
        result = self.conn.execute(delete(favors).where(favors.c.item_id == item_id))
        return int(result.rowcount or 0)

    def delete_item_row(self, item_id: int) -> int:
        result = self.conn.execute(delete(list_items).where(list_items.c.id == item_id))
        return int(result.rowcount or 0)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating the database engine and transaction scope.

    Constructed once from :class:`GroupCartSettings`; services receive it
    via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: GroupCartSettings) -> None:
        self._settings = settings
        self._url = settings.database_url()
        db = settings.database
        self._engine: Engine = init_database(
            self._url,
            echo=db.echo,
            busy_timeout_ms=db.busy_timeout_ms,
            isolation_level=db.isolation_level,
        )
        logger.debug("store opened: %s", self._engine.url.render_as_string(hide_password=True))

    @property
    def url(self) -> str:
        """The SQLAlchemy URL this store is bound to."""
        return self._url

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> GroupCartSettings:
        return self._settings

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """All-or-nothing write scope.

        Commits when the block exits normally; any exception rolls back
        every statement executed in the block and propagates.

        Usage::

            with store.transaction() as txn:
                txn.delete_favors_touching_user(user_id)
                txn.delete_items_of_user(user_id)
                txn.delete_user_row(user_id)
        """
        with self._engine.connect() as conn:
            conn.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
            with conn.begin():
                yield StoreTransaction(conn=conn)

    @contextmanager
    def snapshot(self) -> Iterator[StoreTransaction]:
        """Read-only scope over a single transaction."""
        with self._engine.connect() as conn, conn.begin():
            yield StoreTransaction(conn=conn)

    def close(self) -> None:
        """Release pooled connections. The store is unusable afterwards."""
        self._engine.dispose()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
