"""FavorService — the favor ledger.

Pipeline for ``create_favor``: VALIDATE → RESOLVE (users, owned item) →
CHECK (one favor per item) → INSERT → RESPOND. The pre-check gives a
friendly CONFLICT; the UNIQUE constraint on ``favors.item_id`` decides
races between concurrent creators.

``update_favor`` rewrites amount and reimbursement wholesale. It is not an
audit log: setting ``reimbursed`` false after true drops the original
reimbursement timestamp.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from sqlalchemy import insert, select, update

from groupcart.domain.ledger import FavorState, favor_state, target_state
from groupcart.domain.models import FavorChanges, NewFavor
from groupcart.infrastructure.database.schema import app_users, favors, list_items
from groupcart.services._helpers import now_iso
from groupcart.services.base import BaseService
from groupcart.services.contracts import (
    FavorData,
    FavorListData,
    FavorUpdateData,
    dump_validated,
)
from groupcart.services.guard import guarded
from groupcart.services.result import ErrorCode, ServiceResult
from groupcart.services.telemetry import traced

logger = logging.getLogger(__name__)

_CONFLICT = "Favor already exists for this item"


def _favor_row_payload(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "item_id": row.item_id,
        "item": row.item_name,
        "by_user": row.by_user,
        "for_user": row.for_user,
        "amount": row.amount,
        "fulfilled_at": row.fulfilled_at,
        "reimbursed": row.reimbursed_at is not None,
        "reimbursed_at": row.reimbursed_at,
        "state": str(favor_state(has_favor=True, reimbursed_at=row.reimbursed_at)),
    }


class FavorService(BaseService):
    """Handles favor creation, reimbursement, and favor listings."""

    @traced
    @guarded("create_favor", conflict=_CONFLICT)
    def create_favor(
        self,
        item_id: int,
        by_username: str,
        for_username: str,
        amount: float | None,
    ) -> ServiceResult:
        """Record that *by_username* bought *for_username*'s item.

        Giver and beneficiary may be the same user.
        """
        op = "create_favor"

        vr = self._validate(
            NewFavor,
            {
                "item_id": item_id,
                "by_username": by_username,
                "for_username": for_username,
                "amount": amount,
            },
        )
        if not vr.valid:
            return self._invalid(op, vr)
        new: NewFavor = vr.value

        fulfilled_at = now_iso()
        with self._store.transaction() as txn:
            giver = txn.find_user(new.by_username)
            beneficiary = txn.find_user(new.for_username)
            if giver is None:
                return self._user_not_found(op, new.by_username)
            if beneficiary is None:
                return self._user_not_found(op, new.for_username)

            item = txn.find_owned_item(new.item_id, beneficiary.id)
            if item is None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    "Item not found or does not belong to the specified user",
                    item_id=new.item_id,
                    username=new.for_username,
                )

            existing = txn.find_favor_for_item(new.item_id)
            if existing is not None:
                return ServiceResult.failure(
                    op, ErrorCode.CONFLICT, _CONFLICT, item_id=new.item_id, favor_id=existing.id
                )

            result = txn.conn.execute(
                insert(favors).values(
                    amount=new.amount,
                    fulfilled_at=fulfilled_at,
                    reimbursed_at=None,
                    by_user_id=giver.id,
                    for_user_id=beneficiary.id,
                    item_id=new.item_id,
                )
            )
            favor_id = int(result.inserted_primary_key[0])

        logger.info(
            "favor created: %d item=%d by=%s for=%s",
            favor_id,
            new.item_id,
            new.by_username,
            new.for_username,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                FavorData,
                {
                    "id": favor_id,
                    "item_id": new.item_id,
                    "item": item.item_name,
                    "by_user": new.by_username,
                    "for_user": new.for_username,
                    "amount": new.amount,
                    "fulfilled_at": fulfilled_at,
                    "reimbursed": False,
                    "reimbursed_at": None,
                    "state": str(FavorState.FULFILLED),
                },
            ),
        )

    @traced
    @guarded("update_favor")
    def update_favor(
        self,
        favor_id: int,
        reimbursed: bool | None,
        amount: float | None,
    ) -> ServiceResult:
        """Set the amount and mark or unmark reimbursement.

        ``reimbursed=True`` stamps ``reimbursed_at`` with the current time
        (again, if already reimbursed); ``False`` clears it.
        """
        op = "update_favor"

        vr = self._validate(FavorChanges, {"reimbursed": reimbursed, "amount": amount})
        if not vr.valid:
            return self._invalid(op, vr)
        changes: FavorChanges = vr.value

        with self._store.transaction() as txn:
            row = txn.find_favor(favor_id)
            if row is None:
                return ServiceResult.failure(
                    op, ErrorCode.NOT_FOUND, "Favor not found", favor_id=favor_id
                )

            # Any existing favor may move between fulfilled and reimbursed.
            previous = favor_state(has_favor=True, reimbursed_at=row.reimbursed_at)
            target = target_state(reimbursed=changes.reimbursed)

            reimbursed_at = now_iso() if changes.reimbursed else None
            txn.conn.execute(
                update(favors)
                .where(favors.c.id == favor_id)
                .values(amount=changes.amount, reimbursed_at=reimbursed_at)
            )

        logger.info("favor updated: %d %s -> %s", favor_id, previous, target)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                FavorUpdateData,
                {
                    "id": favor_id,
                    "amount": changes.amount,
                    "reimbursed": changes.reimbursed,
                    "reimbursed_at": reimbursed_at,
                    "state": str(target),
                    "previous_state": str(previous),
                },
            ),
        )

    @traced
    @guarded("favors_for")
    def favors_for(self, username: str) -> ServiceResult:
        """Favors received by *username*, newest first."""
        return self._list_favors("favors_for", username, direction="for")

    @traced
    @guarded("favors_by")
    def favors_by(self, username: str) -> ServiceResult:
        """Favors given by *username*, newest first."""
        return self._list_favors("favors_by", username, direction="by")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _list_favors(
        self,
        op: str,
        username: str,
        *,
        direction: Literal["for", "by"],
    ) -> ServiceResult:
        giver = app_users.alias("giver")
        beneficiary = app_users.alias("beneficiary")
        column = favors.c.for_user_id if direction == "for" else favors.c.by_user_id

        with self._store.snapshot() as txn:
            user = txn.find_user(username)
            if user is None:
                return self._user_not_found(op, username)
            rows = txn.conn.execute(
                select(
                    favors.c.id,
                    favors.c.item_id,
                    list_items.c.item_name,
                    giver.c.username.label("by_user"),
                    beneficiary.c.username.label("for_user"),
                    favors.c.amount,
                    favors.c.fulfilled_at,
                    favors.c.reimbursed_at,
                )
                .select_from(
                    favors.join(list_items, list_items.c.id == favors.c.item_id)
                    .join(giver, giver.c.id == favors.c.by_user_id)
                    .join(beneficiary, beneficiary.c.id == favors.c.for_user_id)
                )
                .where(column == user.id)
                .order_by(favors.c.fulfilled_at.desc(), favors.c.id.desc())
            ).all()

        items = [_favor_row_payload(r) for r in rows]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                FavorListData,
                {"username": username, "direction": direction, "count": len(items), "items": items},
            ),
        )
