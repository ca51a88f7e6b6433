"""Favor ledger lifecycle.

A list item moves through three states:

- ``pending``: no favor exists for the item.
- ``fulfilled``: someone bought the item; ``reimbursed_at`` is null.
- ``reimbursed``: the beneficiary paid the giver back.

State is never stored directly. It is computed from whether a favor row
exists and whether its ``reimbursed_at`` column is set.
"""

from __future__ import annotations

from enum import StrEnum


class FavorState(StrEnum):
    """Fulfillment status of a list item."""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REIMBURSED = "reimbursed"


# Reimbursement can be withdrawn; a favor is never un-fulfilled except by
# deleting its item.
FAVOR_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["fulfilled"],
    "fulfilled": ["fulfilled", "reimbursed"],
    "reimbursed": ["fulfilled", "reimbursed"],
}


def favor_state(*, has_favor: bool, reimbursed_at: str | None = None) -> FavorState:
    """Compute the ledger state of an item from its favor columns."""
    if not has_favor:
        return FavorState.PENDING
    if reimbursed_at is None:
        return FavorState.FULFILLED
    return FavorState.REIMBURSED


def is_valid_transition(current: str, target: str) -> bool:
    """Check if moving from *current* to *target* is allowed."""
    return target in FAVOR_TRANSITIONS.get(current, [])


def target_state(*, reimbursed: bool) -> FavorState:
    """State an existing favor lands in after an update."""
    return FavorState.REIMBURSED if reimbursed else FavorState.FULFILLED
