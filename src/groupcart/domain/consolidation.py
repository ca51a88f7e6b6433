"""Shopping-list consolidation.

Groups every outstanding (unfulfilled) list item by its exact name so a
single shopper can buy for the whole group. The algorithm is storage
agnostic: callers hand in rows read from any snapshot.

Rules:
- The grouping key is the raw ``item_name``. "milk" and "Milk" are two
  entries; no trimming or case folding is applied.
- ``item_ids`` are ascending. ``needed_by`` is aligned with ``item_ids``
  and keeps repeats (a user with two "Eggs" rows appears twice).
- Entries are ordered by item name (code-point order).
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PendingItem:
    """One unfulfilled list item together with its owner's username."""

    item_id: int
    item_name: str
    username: str


@dataclass(frozen=True)
class ShoppingEntry:
    """A consolidated shopping-list line."""

    item: str
    item_ids: list[int] = field(default_factory=list)
    needed_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item,
            "item_ids": list(self.item_ids),
            "needed_by": list(self.needed_by),
        }


def consolidate(rows: Iterable[PendingItem]) -> list[ShoppingEntry]:
    """Group pending items by name into shopping entries.

    Duplicate rows (same ``item_id``) are collapsed so a reader that sees a
    row twice cannot report an item twice.
    """
    by_id: dict[int, PendingItem] = {}
    for row in rows:
        by_id.setdefault(row.item_id, row)

    groups: dict[str, list[PendingItem]] = defaultdict(list)
    for row in by_id.values():
        groups[row.item_name].append(row)

    entries: list[ShoppingEntry] = []
    for name in sorted(groups):
        members = sorted(groups[name], key=lambda r: r.item_id)
        entries.append(
            ShoppingEntry(
                item=name,
                item_ids=[r.item_id for r in members],
                needed_by=[r.username for r in members],
            )
        )
    return entries
