"""ListService — a user's own shopping-list items.

Items are always addressed together with their owner's username; an item
that exists but belongs to someone else is reported as not found.
"""

from __future__ import annotations

import logging

from sqlalchemy import insert, select, update

from groupcart.domain.ledger import favor_state
from groupcart.domain.models import ItemInput
from groupcart.infrastructure.database.schema import app_users, favors, list_items
from groupcart.services._helpers import now_iso
from groupcart.services.base import BaseService
from groupcart.services.contracts import (
    ListItemData,
    ListItemDeleteData,
    UserListData,
    dump_validated,
)
from groupcart.services.guard import guarded
from groupcart.services.result import ErrorCode, ServiceResult
from groupcart.services.telemetry import traced

logger = logging.getLogger(__name__)


def _item_not_found(op: str, item_id: int, username: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        "User or item not found",
        item_id=item_id,
        username=username,
    )


class ListService(BaseService):
    """Handles list item CRUD for a single owner."""

    @traced
    @guarded("create_item")
    def create_item(self, username: str, item_name: str, priority: int) -> ServiceResult:
        op = "create_item"

        vr = self._validate(ItemInput, {"item_name": item_name, "priority": priority})
        if not vr.valid:
            return self._invalid(op, vr)
        item: ItemInput = vr.value

        added_at = now_iso()
        with self._store.transaction() as txn:
            owner = txn.find_user(username)
            if owner is None:
                return self._user_not_found(op, username)
            result = txn.conn.execute(
                insert(list_items).values(
                    item_name=item.item_name,
                    priority=item.priority,
                    added_at=added_at,
                    owner_user_id=owner.id,
                )
            )
            item_id = int(result.inserted_primary_key[0])

        logger.info("item added: %s -> %r (id=%d)", username, item.item_name, item_id)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ListItemData,
                {
                    "id": item_id,
                    "item": item.item_name,
                    "priority": item.priority,
                    "added_at": added_at,
                    "owner": username,
                },
            ),
        )

    @traced
    @guarded("get_list")
    def get_list(self, username: str) -> ServiceResult:
        """The user's items by priority then age, with fulfillment status."""
        op = "get_list"
        giver = app_users.alias("giver")

        with self._store.snapshot() as txn:
            owner = txn.find_user(username)
            if owner is None:
                return self._user_not_found(op, username)
            rows = txn.conn.execute(
                select(
                    list_items.c.id,
                    list_items.c.item_name,
                    list_items.c.priority,
                    list_items.c.added_at,
                    favors.c.id.label("favor_id"),
                    favors.c.fulfilled_at,
                    favors.c.reimbursed_at,
                    giver.c.username.label("fulfilled_by"),
                )
                .select_from(
                    list_items.outerjoin(favors, favors.c.item_id == list_items.c.id).outerjoin(
                        giver, giver.c.id == favors.c.by_user_id
                    )
                )
                .where(list_items.c.owner_user_id == owner.id)
                .order_by(list_items.c.priority, list_items.c.added_at, list_items.c.id)
            ).all()

        items = [
            {
                "id": r.id,
                "item": r.item_name,
                "priority": r.priority,
                "added_at": r.added_at,
                "fulfilled": r.favor_id is not None,
                "fulfilled_by": r.fulfilled_by,
                "fulfilled_at": r.fulfilled_at,
                "favor_id": r.favor_id,
                "state": str(
                    favor_state(has_favor=r.favor_id is not None, reimbursed_at=r.reimbursed_at)
                ),
            }
            for r in rows
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                UserListData, {"username": username, "count": len(items), "items": items}
            ),
        )

    @traced
    @guarded("update_item")
    def update_item(
        self,
        item_id: int,
        username: str,
        item_name: str,
        priority: int,
    ) -> ServiceResult:
        """Replace name and priority of an owned item; its favor is untouched."""
        op = "update_item"

        vr = self._validate(ItemInput, {"item_name": item_name, "priority": priority})
        if not vr.valid:
            return self._invalid(op, vr)
        item: ItemInput = vr.value

        with self._store.transaction() as txn:
            owner = txn.find_user(username)
            row = txn.find_owned_item(item_id, owner.id) if owner is not None else None
            if row is None:
                return _item_not_found(op, item_id, username)
            txn.conn.execute(
                update(list_items)
                .where(list_items.c.id == item_id)
                .values(item_name=item.item_name, priority=item.priority)
            )

        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ListItemData,
                {
                    "id": item_id,
                    "item": item.item_name,
                    "priority": item.priority,
                    "added_at": row.added_at,
                    "owner": username,
                },
            ),
        )

    @traced
    @guarded("delete_item")
    def delete_item(self, item_id: int, username: str) -> ServiceResult:
        """Delete an owned item together with its favor, if any."""
        op = "delete_item"

        with self._store.transaction() as txn:
            owner = txn.find_user(username)
            row = txn.find_owned_item(item_id, owner.id) if owner is not None else None
            if row is None:
                return _item_not_found(op, item_id, username)
            removed_favors = txn.delete_favor_for_item(item_id)
            txn.delete_item_row(item_id)

        logger.info("item deleted: %d (favor removed: %s)", item_id, bool(removed_favors))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ListItemDeleteData,
                {"id": item_id, "owner": username, "deleted_favor": removed_favors > 0},
            ),
        )
