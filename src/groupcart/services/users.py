"""UserService — user creation, lookup, partial update, and cascading delete.

Pipeline for mutations: VALIDATE → CHECK → APPLY → RESPOND, all checks and
writes inside one store transaction.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import insert, update

from groupcart.domain.models import NewUser, UserChanges
from groupcart.infrastructure.database.schema import app_users
from groupcart.services.base import BaseService
from groupcart.services.contracts import UserData, UserDeleteData, UserUpdateData, dump_validated
from groupcart.services.guard import guarded
from groupcart.services.result import ErrorCode, ServiceResult
from groupcart.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _user_payload(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "username": row.username,
        "first_name": row.first_name,
        "last_name": row.last_name,
        "color": row.color,
        "group_id": row.group_id,
    }


class UserService(BaseService):
    """Handles users and the cascade that removes them."""

    @traced
    @guarded("create_user", conflict="User already exists")
    def create_user(self, username: str, first_name: str, last_name: str) -> ServiceResult:
        """Create a user with a unique username."""
        op = "create_user"

        vr = self._validate(
            NewUser,
            {"username": username, "first_name": first_name, "last_name": last_name},
        )
        if not vr.valid:
            return self._invalid(op, vr)
        new: NewUser = vr.value

        with self._store.transaction() as txn:
            if txn.find_user(new.username) is not None:
                return ServiceResult.failure(
                    op, ErrorCode.CONFLICT, "User already exists", username=new.username
                )
            result = txn.conn.execute(
                insert(app_users).values(
                    username=new.username,
                    first_name=new.first_name,
                    last_name=new.last_name,
                )
            )
            user_id = int(result.inserted_primary_key[0])

        logger.info("user created: %s (id=%d)", new.username, user_id)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                UserData,
                {
                    "id": user_id,
                    "username": new.username,
                    "first_name": new.first_name,
                    "last_name": new.last_name,
                },
            ),
        )

    @traced
    @guarded("get_user")
    def get_user(self, username: str) -> ServiceResult:
        op = "get_user"
        with self._store.snapshot() as txn:
            row = txn.find_user(username)
        if row is None:
            return self._user_not_found(op, username)
        return ServiceResult(ok=True, op=op, data=dump_validated(UserData, _user_payload(row)))

    @traced
    @guarded("update_user")
    def update_user(self, username: str, changes: UserChanges | dict[str, Any]) -> ServiceResult:
        """Apply a sparse update; only supplied slots change.

        *changes* may be a ready :class:`UserChanges` or a plain dict holding
        only the keys the caller wants to change.
        """
        op = "update_user"

        if isinstance(changes, UserChanges):
            patch = changes
        else:
            vr = self._validate(UserChanges, changes)
            if not vr.valid:
                return self._invalid(op, vr)
            patch = vr.value

        values = patch.applied()

        with self._store.transaction() as txn:
            row = txn.find_user(username)
            if row is None:
                return self._user_not_found(op, username)

            group_id = values.get("group_id")
            if group_id is not None and not txn.group_exists(group_id):
                return ServiceResult.failure(
                    op, ErrorCode.NOT_FOUND, f"Group not found: {group_id}", group_id=group_id
                )

            txn.conn.execute(update(app_users).where(app_users.c.id == row.id).values(**values))
            updated = txn.find_user(username)

        logger.info("user updated: %s fields=%s", username, sorted(values))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                UserUpdateData,
                {**_user_payload(updated), "fields_changed": sorted(values)},
            ),
        )

    @traced
    @guarded("delete_user")
    def delete_user(self, username: str) -> ServiceResult:
        """Delete a user with its items and every favor that touches it.

        Favors on the user's items, favors given, and favors received are
        removed first, then the items, then the user, all in one
        transaction. Reported counts are the rows actually deleted.
        """
        op = "delete_user"

        with self._store.transaction() as txn:
            row = txn.find_user(username)
            if row is None:
                return self._user_not_found(op, username)

            with trace_span("cascade"):
                deleted_favors = txn.delete_favors_touching_user(row.id)
                deleted_items = txn.delete_items_of_user(row.id)
                txn.delete_user_row(row.id)

        logger.info(
            "user deleted: %s items=%d favors=%d", username, deleted_items, deleted_favors
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                UserDeleteData,
                {
                    "username": username,
                    "deleted_items": deleted_items,
                    "deleted_favors": deleted_favors,
                },
            ),
        )
