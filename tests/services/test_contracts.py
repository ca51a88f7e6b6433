"""Tests for payload contracts at the service boundary."""

from __future__ import annotations

import pydantic
import pytest

from groupcart.infrastructure.store import Store
from groupcart.services.contracts import (
    FavorData,
    FavorListData,
    GroupData,
    ShoppingListData,
    UserDeleteData,
    UserListData,
    dump_validated,
)
from groupcart.services.favors import FavorService
from groupcart.services.groups import GroupService
from groupcart.services.items import ListService
from groupcart.services.shop import ShopService
from groupcart.services.users import UserService
from tests.conftest import create_favor, create_item, create_user


class TestDumpValidated:
    def test_normalizes(self) -> None:
        data = dump_validated(GroupData, {"id": "g", "name": "G"})
        assert data == {"id": "g", "name": "G", "users": [], "user_colors": {}}

    def test_rejects_wrong_key(self) -> None:
        payload = {"count": 1, "items": [{"item": "Milk", "itemIds": [1]}]}
        with pytest.raises(pydantic.ValidationError):
            dump_validated(ShoppingListData, payload)

    def test_rejects_unknown_state(self) -> None:
        payload = {
            "id": 1,
            "item_id": 1,
            "item": "Milk",
            "by_user": "a",
            "for_user": "b",
            "amount": 1.0,
            "fulfilled_at": "t",
            "reimbursed": False,
            "state": "closed",
        }
        with pytest.raises(pydantic.ValidationError):
            dump_validated(FavorData, payload)


class TestServicePayloads:
    def test_payloads_match_contracts(self, store: Store) -> None:
        create_user(store, "alice")
        create_user(store, "bob")
        GroupService(store).create_group("flat", "Flat", ["alice", "bob"])
        milk = create_item(store, "alice", "Milk")
        create_item(store, "bob", "Milk")
        create_favor(store, milk["id"], "bob", "alice", 1.5)

        UserListData.model_validate(ListService(store).get_list("alice").data)
        FavorListData.model_validate(FavorService(store).favors_for("alice").data)
        GroupData.model_validate(GroupService(store).get_group("flat").data)
        ShoppingListData.model_validate(ShopService(store).build_shopping_list().data)
        UserDeleteData.model_validate(UserService(store).delete_user("bob").data)
