"""ShopService — the consolidated shopping list.

Reads every unfulfilled item (no favor row) with its owner's username in
one read transaction, then hands the rows to the pure
:func:`~groupcart.domain.consolidation.consolidate` algorithm. Never writes.
"""

from __future__ import annotations

from sqlalchemy import select

from groupcart.domain.consolidation import PendingItem, consolidate
from groupcart.infrastructure.database.schema import app_users, favors, list_items
from groupcart.services.base import BaseService
from groupcart.services.contracts import ShoppingListData, dump_validated
from groupcart.services.guard import guarded
from groupcart.services.result import ServiceResult
from groupcart.services.telemetry import trace_span, traced


class ShopService(BaseService):
    """Builds the group's shopping list from outstanding items."""

    def pending_items(self) -> list[PendingItem]:
        """Snapshot of every list item that has no favor yet."""
        stmt = (
            select(list_items.c.id, list_items.c.item_name, app_users.c.username)
            .select_from(
                list_items.join(app_users, app_users.c.id == list_items.c.owner_user_id).outerjoin(
                    favors, favors.c.item_id == list_items.c.id
                )
            )
            .where(favors.c.id.is_(None))
        )
        with self._store.snapshot() as txn:
            rows = txn.conn.execute(stmt).all()
        return [PendingItem(item_id=r.id, item_name=r.item_name, username=r.username) for r in rows]

    @traced
    @guarded("build_shopping_list")
    def build_shopping_list(self) -> ServiceResult:
        """One entry per distinct item name among unfulfilled items."""
        op = "build_shopping_list"

        with trace_span("read") as span:
            rows = self.pending_items()
            if span is not None:
                span.annotate("pending_items", len(rows))

        with trace_span("consolidate"):
            entries = consolidate(rows)

        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ShoppingListData,
                {"count": len(entries), "items": [e.to_dict() for e in entries]},
            ),
        )
