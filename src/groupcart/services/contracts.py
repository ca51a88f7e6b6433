"""Shapes of the ``data`` dicts that services put in a ServiceResult.

Services pass every success payload through :func:`dump_validated`, so a
renamed or missing key (``item_ids`` becoming ``itemIds``, say) raises
inside the service instead of reaching JSON consumers.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

LedgerState = Literal["pending", "fulfilled", "reimbursed"]


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Round-trip *data* through *model_cls*; raises ValidationError on a bad shape."""
    return model_cls.model_validate(data).model_dump(mode="python")


# Users and groups


class UserData(BaseModel):
    """Payload for ``create_user`` / ``get_user``."""

    id: int
    username: str
    first_name: str
    last_name: str
    color: str | None = None
    group_id: str | None = None


class UserUpdateData(UserData):
    """Payload for ``update_user``."""

    fields_changed: list[str]


class UserDeleteData(BaseModel):
    """Payload for ``delete_user``."""

    username: str
    deleted_items: int
    deleted_favors: int


class GroupData(BaseModel):
    """Payload for ``create_group`` / ``get_group``."""

    id: str
    name: str
    users: list[str] = Field(default_factory=list)
    user_colors: dict[str, str] = Field(default_factory=dict)


# List items


class ListItemData(BaseModel):
    """Payload for ``create_item`` / ``update_item``."""

    id: int
    item: str
    priority: int
    added_at: str
    owner: str


class ListItemDeleteData(BaseModel):
    """Payload for ``delete_item``."""

    id: int
    owner: str
    deleted_favor: bool


class ListEntry(BaseModel):
    """One row of a user's own list with its fulfillment status."""

    model_config = ConfigDict(extra="allow")

    id: int
    item: str
    priority: int
    added_at: str
    fulfilled: bool
    fulfilled_by: str | None = None
    fulfilled_at: str | None = None
    favor_id: int | None = None
    state: LedgerState


class UserListData(BaseModel):
    """Payload for ``get_list``."""

    username: str
    count: int
    items: list[ListEntry]


# Favors


class FavorData(BaseModel):
    """Payload for ``create_favor`` and rows of ``favors_for`` / ``favors_by``."""

    model_config = ConfigDict(extra="allow")

    id: int
    item_id: int
    item: str
    by_user: str
    for_user: str
    amount: float
    fulfilled_at: str
    reimbursed: bool
    reimbursed_at: str | None = None
    state: LedgerState


class FavorUpdateData(BaseModel):
    """Payload for ``update_favor``."""

    id: int
    amount: float
    reimbursed: bool
    reimbursed_at: str | None = None
    state: LedgerState
    previous_state: LedgerState


class FavorListData(BaseModel):
    """Payload for ``favors_for`` / ``favors_by``."""

    username: str
    direction: Literal["for", "by"]
    count: int
    items: list[FavorData]


# Shopping list


class ShoppingEntryData(BaseModel):
    """One consolidated shopping-list line."""

    item: str
    item_ids: list[int]
    needed_by: list[str]


class ShoppingListData(BaseModel):
    """Payload for ``build_shopping_list``."""

    count: int
    items: list[ShoppingEntryData]
