"""SQLAlchemy Core table definitions for the groupcart database.

Uniqueness (usernames, group ids, one favor per item) and referential
integrity are declared here so the database enforces them at commit
time. Service-level pre-checks only produce friendlier errors.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

user_groups = Table(
    "user_groups",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
)

app_users = Table(
    "app_users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", Text, nullable=False, unique=True),
    Column("first_name", Text, nullable=False),
    Column("last_name", Text, nullable=False),
    Column("color", Text),  # six hex digits, no leading '#'
    Column("group_id", Text, ForeignKey("user_groups.id")),
)

list_items = Table(
    "list_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("item_name", Text, nullable=False),
    Column("priority", Integer, nullable=False),
    Column("added_at", Text, nullable=False),
    Column("owner_user_id", Integer, ForeignKey("app_users.id"), nullable=False),
    CheckConstraint("priority BETWEEN 1 AND 3", name="ck_list_items_priority"),
)

favors = Table(
    "favors",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("amount", REAL, nullable=False),
    Column("fulfilled_at", Text, nullable=False),
    Column("reimbursed_at", Text),
    Column("by_user_id", Integer, ForeignKey("app_users.id"), nullable=False),
    Column("for_user_id", Integer, ForeignKey("app_users.id"), nullable=False),
    Column("item_id", Integer, ForeignKey("list_items.id"), nullable=False, unique=True),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_app_users_group_id", app_users.c.group_id)
Index("ix_list_items_owner", list_items.c.owner_user_id)
Index("ix_list_items_name", list_items.c.item_name)
Index("ix_favors_by_user", favors.c.by_user_id)
Index("ix_favors_for_user", favors.c.for_user_id)

TABLE_NAMES = ("user_groups", "app_users", "list_items", "favors")
