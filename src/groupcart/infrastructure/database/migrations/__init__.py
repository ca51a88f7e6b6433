"""Alembic revisions for the groupcart schema, driven without ``alembic.ini``.

Every helper takes the SQLAlchemy URL of the target database; the Alembic
``Config`` is assembled in code and points at the ``versions/`` directory
next to this module.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

if TYPE_CHECKING:
    from alembic.script import Script
    from sqlalchemy.engine import Engine

MIGRATIONS_DIR = Path(__file__).parent


def build_config(db_url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Escape '%' for ConfigParser interpolation (URL-encoded passwords).
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    return cfg


def head_revision(db_url: str) -> str | None:
    return ScriptDirectory.from_config(build_config(db_url)).get_current_head()


def current_revision(engine: Engine) -> str | None:
    """Revision recorded in ``alembic_version``, or None if never stamped."""
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def pending_revisions(db_url: str, current: str | None) -> list[Script]:
    """Revisions between *current* and head, oldest first."""
    script = ScriptDirectory.from_config(build_config(db_url))
    newest_first = script.iterate_revisions("heads", current or "base")
    return list(reversed(list(newest_first)))


def stamp_head(db_url: str) -> None:
    """Record head in ``alembic_version`` without running any revision.

    Used for databases whose tables were created from ``schema.metadata``.
    """
    command.stamp(build_config(db_url), "head")


def upgrade_head(db_url: str) -> None:
    command.upgrade(build_config(db_url), "head")
