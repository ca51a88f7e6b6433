"""Baseline schema — groups, users, list items, and favors.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Databases created by ``groupcart init`` are stamped at this revision
without running it; ``groupcart upgrade`` applies it to an empty database.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "user_groups",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
    )

    op.create_table(
        "app_users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.Text, nullable=False, unique=True),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("color", sa.Text),
        sa.Column("group_id", sa.Text, sa.ForeignKey("user_groups.id")),
    )
    op.create_index("ix_app_users_group_id", "app_users", ["group_id"])

    op.create_table(
        "list_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("item_name", sa.Text, nullable=False),
        sa.Column("priority", sa.Integer, nullable=False),
        sa.Column("added_at", sa.Text, nullable=False),
        sa.Column("owner_user_id", sa.Integer, sa.ForeignKey("app_users.id"), nullable=False),
        sa.CheckConstraint("priority BETWEEN 1 AND 3", name="ck_list_items_priority"),
    )
    op.create_index("ix_list_items_owner", "list_items", ["owner_user_id"])
    op.create_index("ix_list_items_name", "list_items", ["item_name"])

    op.create_table(
        "favors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("amount", sa.REAL, nullable=False),
        sa.Column("fulfilled_at", sa.Text, nullable=False),
        sa.Column("reimbursed_at", sa.Text),
        sa.Column("by_user_id", sa.Integer, sa.ForeignKey("app_users.id"), nullable=False),
        sa.Column("for_user_id", sa.Integer, sa.ForeignKey("app_users.id"), nullable=False),
        sa.Column(
            "item_id",
            sa.Integer,
            sa.ForeignKey("list_items.id"),
            nullable=False,
            unique=True,
        ),
    )
    op.create_index("ix_favors_by_user", "favors", ["by_user_id"])
    op.create_index("ix_favors_for_user", "favors", ["for_user_id"])


def downgrade() -> None:
    op.drop_table("favors")
    op.drop_table("list_items")
    op.drop_table("app_users")
    op.drop_table("user_groups")
