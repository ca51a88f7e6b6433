"""Shared pytest fixtures and test helpers for groupcart tests."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from groupcart.config.settings import GroupCartSettings
from groupcart.infrastructure.store import Store
from groupcart.services.result import ServiceResult


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Temporary data directory; the database lands in ``.groupcart/``."""
    return tmp_path


@pytest.fixture
def store(data_root: Path) -> Store:
    """Fully initialized store on a temp SQLite file."""
    settings = GroupCartSettings.from_cli(data_root=data_root)
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(data_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(data_root)
    monkeypatch.delenv("GROUPCART_CONFIG", raising=False)
    monkeypatch.delenv("GROUPCART_DB_URL", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_user(store: Store, username: str, first: str = "Test", last: str = "User") -> dict:
    """Create a user via UserService, asserting success."""
    from groupcart.services.users import UserService

    result = UserService(store).create_user(username, first, last)
    assert result.ok, result.error
    return result.data


def create_item(store: Store, username: str, item_name: str, priority: int = 3) -> dict:
    """Add a list item via ListService, asserting success."""
    from groupcart.services.items import ListService

    result = ListService(store).create_item(username, item_name, priority)
    assert result.ok, result.error
    return result.data


def create_favor(
    store: Store, item_id: int, by_username: str, for_username: str, amount: float = 1.0
) -> dict[str, Any]:
    """Record a favor via FavorService, asserting success."""
    from groupcart.services.favors import FavorService

    result = FavorService(store).create_favor(item_id, by_username, for_username, amount)
    assert result.ok, result.error
    return result.data


def count_rows(store: Store, table: Any) -> int:
    """Number of rows currently in *table*."""
    from sqlalchemy import func, select

    with store.engine.connect() as conn:
        return int(conn.execute(select(func.count()).select_from(table)).scalar_one())


def run_concurrently(calls: list[Callable[[], ServiceResult]]) -> list[ServiceResult]:
    """Start every call at once (behind a barrier) and collect the results."""
    barrier = threading.Barrier(len(calls))
    results: list[ServiceResult] = []
    lock = threading.Lock()

    def attempt(call: Callable[[], ServiceResult]) -> None:
        barrier.wait()
        result = call()
        with lock:
            results.append(result)

    threads = [threading.Thread(target=attempt, args=(call,)) for call in calls]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


def assert_one_winner(results: list[ServiceResult]) -> None:
    """Exactly one success; every other attempt reported CONFLICT."""
    assert sum(r.ok for r in results) == 1
    assert {r.error.code for r in results if not r.ok and r.error} == {"CONFLICT"}
    assert all(r.error is not None for r in results if not r.ok)
