"""Tests for database engine setup and initialization."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from groupcart.infrastructure.database.engine import (
    BEGIN_MODE_OPTION,
    create_db_engine,
    init_database,
    is_sqlite,
)


@pytest.fixture
def engine(tmp_path: Path) -> Engine:
    eng = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    try:
        yield eng
    finally:
        eng.dispose()


class TestIsSqlite:
    def test_sqlite_file(self) -> None:
        assert is_sqlite("sqlite:///x.db")

    def test_postgres(self) -> None:
        assert not is_sqlite("postgresql+psycopg://u:p@localhost/db")


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, engine: Engine) -> None:
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"

    def test_foreign_keys_enabled(self, engine: Engine) -> None:
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_busy_timeout(self, tmp_path: Path) -> None:
        eng = create_db_engine(f"sqlite:///{tmp_path / 't.db'}", busy_timeout_ms=1234)
        try:
            with eng.connect() as conn:
                assert conn.execute(text("PRAGMA busy_timeout")).scalar() == 1234
        finally:
            eng.dispose()

    def test_immediate_begin_takes_write_lock(self, engine: Engine) -> None:
        with engine.connect() as writer:
            writer.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
            with writer.begin():
                writer.execute(text("CREATE TABLE IF NOT EXISTS t (x INTEGER)"))

        other = create_db_engine(str(engine.url), busy_timeout_ms=0)
        try:
            with engine.connect() as holder:
                holder.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
                with holder.begin():
                    with other.connect() as conn:
                        conn.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
                        with pytest.raises(Exception, match="locked"):
                            conn.begin()
        finally:
            other.dispose()


class TestInitDatabase:
    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db = tmp_path / "nested" / "dir" / "groupcart.db"
        eng = init_database(f"sqlite:///{db}")
        try:
            assert db.parent.is_dir()
            assert db.exists()
        finally:
            eng.dispose()

    def test_creates_all_tables(self, tmp_path: Path) -> None:
        eng = init_database(f"sqlite:///{tmp_path / 'g.db'}")
        try:
            names = set(inspect(eng).get_table_names())
            assert {"user_groups", "app_users", "list_items", "favors"} <= names
        finally:
            eng.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        url = f"sqlite:///{tmp_path / 'g.db'}"
        init_database(url).dispose()
        eng = init_database(url)
        try:
            with eng.connect() as conn:
                assert conn.execute(text("SELECT COUNT(*) FROM app_users")).scalar() == 0
        finally:
            eng.dispose()
