"""Database engine, schema, and constraint classification via SQLAlchemy Core."""

from groupcart.infrastructure.database.engine import create_db_engine, init_database
from groupcart.infrastructure.database.errors import ViolationKind, classify_integrity_error
from groupcart.infrastructure.database.schema import (
    app_users,
    favors,
    list_items,
    metadata,
    user_groups,
)

__all__ = [
    "ViolationKind",
    "app_users",
    "classify_integrity_error",
    "create_db_engine",
    "favors",
    "init_database",
    "list_items",
    "metadata",
    "user_groups",
]
