"""GroupService — group creation with initial members, and group lookup."""

from __future__ import annotations

import logging

from sqlalchemy import insert, select, update

from groupcart.domain.models import NewGroup
from groupcart.infrastructure.database.schema import app_users, user_groups
from groupcart.services._helpers import color_hex
from groupcart.services.base import BaseService
from groupcart.services.contracts import GroupData, dump_validated
from groupcart.services.guard import Rollback, guarded
from groupcart.services.result import ErrorCode, ServiceResult
from groupcart.services.telemetry import traced

logger = logging.getLogger(__name__)


class GroupService(BaseService):
    """Handles groups and membership assignment at creation."""

    @traced
    @guarded("create_group", conflict="Group already exists")
    def create_group(
        self,
        group_id: str,
        name: str,
        usernames: list[str] | None = None,
    ) -> ServiceResult:
        """Create a group and move the listed users into it.

        Either the group exists afterwards with every listed user as a
        member, or nothing changed at all.
        """
        op = "create_group"

        vr = self._validate(
            NewGroup, {"group_id": group_id, "name": name, "usernames": usernames or []}
        )
        if not vr.valid:
            return self._invalid(op, vr)
        new: NewGroup = vr.value

        with self._store.transaction() as txn:
            if txn.group_exists(new.group_id):
                return ServiceResult.failure(
                    op, ErrorCode.CONFLICT, "Group already exists", group_id=new.group_id
                )

            found = {r.username for r in txn.find_users(new.usernames)}
            missing = [u for u in new.usernames if u not in found]
            if missing:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"One or more users not found: {', '.join(missing)}",
                    missing=missing,
                )

            txn.conn.execute(insert(user_groups).values(id=new.group_id, name=new.name))

            if new.usernames:
                result = txn.conn.execute(
                    update(app_users)
                    .where(app_users.c.username.in_(new.usernames))
                    .values(group_id=new.group_id)
                )
                # A member deleted between the check and the update.
                if result.rowcount != len(new.usernames):
                    raise Rollback(
                        ErrorCode.NOT_FOUND,
                        "One or more users not found",
                        expected=len(new.usernames),
                        updated=result.rowcount,
                    )

        logger.info("group created: %s members=%d", new.group_id, len(new.usernames))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                GroupData,
                {"id": new.group_id, "name": new.name, "users": sorted(new.usernames)},
            ),
        )

    @traced
    @guarded("get_group")
    def get_group(self, group_id: str) -> ServiceResult:
        """Group name, member usernames, and members' display colors."""
        op = "get_group"

        with self._store.snapshot() as txn:
            group = txn.find_group(group_id)
            if group is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_FOUND, f"Group not found: {group_id}", group_id=group_id
                )
            members = txn.conn.execute(
                select(app_users.c.username, app_users.c.color)
                .where(app_users.c.group_id == group_id)
                .order_by(app_users.c.username)
            ).all()

        user_colors = {m.username: color_hex(m.color) for m in members if m.color}
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                GroupData,
                {
                    "id": group.id,
                    "name": group.name,
                    "users": [m.username for m in members],
                    "user_colors": user_colors,
                },
            ),
        )
