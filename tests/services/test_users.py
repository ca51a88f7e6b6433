"""Tests for UserService — creation, lookup, sparse update, cascading delete."""

from __future__ import annotations

import functools

import pytest
from sqlalchemy import insert, or_, select

from groupcart.domain.models import UserChanges
from groupcart.infrastructure.database.schema import app_users, favors, list_items, user_groups
from groupcart.infrastructure.store import Store, StoreTransaction
from groupcart.services.users import UserService
from tests.conftest import (
    assert_one_winner,
    count_rows,
    create_favor,
    create_item,
    create_user,
    run_concurrently,
)


def _add_group(store: Store, group_id: str = "dev-team") -> None:
    with store.transaction() as txn:
        txn.conn.execute(insert(user_groups).values(id=group_id, name="Dev Team"))


# ---------------------------------------------------------------------------
# create_user
# ---------------------------------------------------------------------------


class TestCreateUser:
    def test_basic(self, store: Store) -> None:
        result = UserService(store).create_user("alice", "Alice", "Smith")
        assert result.ok
        assert result.op == "create_user"
        assert result.data["username"] == "alice"
        assert result.data["id"] > 0
        assert result.data["color"] is None
        assert result.data["group_id"] is None

    def test_duplicate_conflicts(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).create_user("alice", "Other", "Person")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CONFLICT"
        assert count_rows(store, app_users) == 1

    def test_concurrent_creators_one_wins(self, store: Store) -> None:
        svc = UserService(store)
        results = run_concurrently(
            [functools.partial(svc.create_user, "dup", f"First{i}", "Last") for i in range(6)]
        )

        assert_one_winner(results)
        assert count_rows(store, app_users) == 1

    def test_unique_username_enforced_without_precheck(
        self, store: Store, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        create_user(store, "alice")
        monkeypatch.setattr(StoreTransaction, "find_user", lambda self, username: None)

        result = UserService(store).create_user("alice", "Other", "Person")

        assert result.error.code == "CONFLICT"
        assert result.error.message == "User already exists"
        assert result.error.detail == {"constraint": "unique"}
        assert count_rows(store, app_users) == 1

    def test_empty_first_name(self, store: Store) -> None:
        result = UserService(store).create_user("alice", "", "Smith")
        assert not result.ok
        assert result.error.code == "VALIDATION_FAILED"
        assert "first_name" in result.error.message
        assert count_rows(store, app_users) == 0

    def test_empty_last_name(self, store: Store) -> None:
        result = UserService(store).create_user("alice", "Alice", "")
        assert result.error.code == "VALIDATION_FAILED"


# ---------------------------------------------------------------------------
# get_user
# ---------------------------------------------------------------------------


class TestGetUser:
    def test_found(self, store: Store) -> None:
        created = create_user(store, "alice", "Alice", "Smith")
        result = UserService(store).get_user("alice")
        assert result.ok
        assert result.data["id"] == created["id"]
        assert result.data["first_name"] == "Alice"

    def test_missing(self, store: Store) -> None:
        result = UserService(store).get_user("ghost")
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "User not found: ghost"


# ---------------------------------------------------------------------------
# update_user
# ---------------------------------------------------------------------------


class TestUpdateUser:
    def test_only_supplied_fields_change(self, store: Store) -> None:
        create_user(store, "alice", "Alice", "Smith")
        result = UserService(store).update_user("alice", {"first_name": "Alicia"})
        assert result.ok
        assert result.data["first_name"] == "Alicia"
        assert result.data["last_name"] == "Smith"
        assert result.data["fields_changed"] == ["first_name"]

    def test_color_normalized(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).update_user("alice", {"color": "#00FF00"})
        assert result.data["color"] == "00ff00"

    def test_accepts_model(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).update_user("alice", UserChanges(last_name="Jones"))
        assert result.data["last_name"] == "Jones"

    def test_no_fields(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).update_user("alice", {})
        assert result.error.code == "VALIDATION_FAILED"
        assert "At least one field" in result.error.message

    def test_unknown_user(self, store: Store) -> None:
        result = UserService(store).update_user("ghost", {"first_name": "G"})
        assert result.error.code == "NOT_FOUND"

    def test_join_group(self, store: Store) -> None:
        create_user(store, "alice")
        _add_group(store)
        result = UserService(store).update_user("alice", {"group_id": "dev-team"})
        assert result.data["group_id"] == "dev-team"

    def test_unknown_group(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).update_user("alice", {"group_id": "nowhere"})
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "Group not found: nowhere"
        assert UserService(store).get_user("alice").data["group_id"] is None

    def test_null_group_leaves_group(self, store: Store) -> None:
        create_user(store, "alice")
        _add_group(store)
        svc = UserService(store)
        svc.update_user("alice", {"group_id": "dev-team"})
        result = svc.update_user("alice", {"group_id": None})
        assert result.ok
        assert result.data["group_id"] is None

    def test_omitted_group_untouched(self, store: Store) -> None:
        create_user(store, "alice")
        _add_group(store)
        svc = UserService(store)
        svc.update_user("alice", {"group_id": "dev-team"})
        result = svc.update_user("alice", {"color": "123abc"})
        assert result.data["group_id"] == "dev-team"


# ---------------------------------------------------------------------------
# delete_user
# ---------------------------------------------------------------------------


class TestDeleteUser:
    def test_missing(self, store: Store) -> None:
        result = UserService(store).delete_user("ghost")
        assert result.error.code == "NOT_FOUND"

    def test_plain_user(self, store: Store) -> None:
        create_user(store, "alice")
        result = UserService(store).delete_user("alice")
        assert result.ok
        assert result.data == {"username": "alice", "deleted_items": 0, "deleted_favors": 0}
        assert count_rows(store, app_users) == 0

    def test_cascade_counts_match_store(self, store: Store) -> None:
        alice = create_user(store, "alice")
        create_user(store, "bob")
        create_user(store, "carol")
        milk = create_item(store, "alice", "Milk")
        create_item(store, "alice", "Eggs")
        bread = create_item(store, "bob", "Bread")
        tea = create_item(store, "carol", "Tea")
        create_favor(store, milk["id"], "bob", "alice")  # on alice's item
        create_favor(store, bread["id"], "alice", "bob")  # given by alice
        create_favor(store, tea["id"], "bob", "carol")  # unrelated

        items_before = count_rows(store, list_items)
        favors_before = count_rows(store, favors)

        result = UserService(store).delete_user("alice")

        assert result.ok
        assert result.data["deleted_items"] == 2
        assert result.data["deleted_favors"] == 2
        assert count_rows(store, list_items) == items_before - 2
        assert count_rows(store, favors) == favors_before - 2

        with store.engine.connect() as conn:
            dangling = conn.execute(
                select(favors).where(
                    or_(favors.c.by_user_id == alice["id"], favors.c.for_user_id == alice["id"])
                )
            ).all()
            assert dangling == []
            assert conn.execute(
                select(list_items).where(list_items.c.owner_user_id == alice["id"])
            ).all() == []

    def test_unrelated_favor_survives(self, store: Store) -> None:
        create_user(store, "alice")
        create_user(store, "bob")
        create_user(store, "carol")
        tea = create_item(store, "carol", "Tea")
        favor = create_favor(store, tea["id"], "bob", "carol")
        UserService(store).delete_user("alice")
        with store.snapshot() as txn:
            assert txn.find_favor(favor["id"]) is not None

    def test_self_favor_counted_once(self, store: Store) -> None:
        create_user(store, "alice")
        milk = create_item(store, "alice", "Milk")
        create_favor(store, milk["id"], "alice", "alice")
        result = UserService(store).delete_user("alice")
        assert result.data["deleted_favors"] == 1
        assert result.data["deleted_items"] == 1
