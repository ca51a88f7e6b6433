"""Tests for the list command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from groupcart.cli import cli


def _json(runner: CliRunner, *args: str) -> tuple[int, dict[str, Any]]:
    result = runner.invoke(cli, ["--json", *args])
    return result.exit_code, json.loads(result.output)


@pytest.mark.usefixtures("_isolated_root")
class TestListCommands:
    @pytest.fixture(autouse=True)
    def _alice(self, _isolated_root: None, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "add", "alice", "Alice", "Smith"])

    def test_add_default_priority(self, cli_runner: CliRunner) -> None:
        code, data = _json(cli_runner, "list", "add", "alice", "Milk")
        assert code == 0
        assert data["data"]["priority"] == 3

    def test_show_orders_by_priority(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["list", "add", "alice", "Milk"])
        cli_runner.invoke(cli, ["list", "add", "alice", "Bread", "-p", "1"])
        code, data = _json(cli_runner, "list", "show", "alice")
        assert code == 0
        assert [i["item"] for i in data["data"]["items"]] == ["Bread", "Milk"]

    def test_priority_out_of_range_rejected_by_click(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["list", "add", "alice", "Milk", "-p", "5"])
        assert result.exit_code == 2

    def test_edit(self, cli_runner: CliRunner) -> None:
        _, created = _json(cli_runner, "list", "add", "alice", "Milk")
        item_id = str(created["data"]["id"])
        code, data = _json(cli_runner, "list", "edit", "alice", item_id, "Oat milk", "-p", "2")
        assert code == 0
        assert data["data"]["item"] == "Oat milk"
        assert data["data"]["priority"] == 2

    def test_edit_requires_priority(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["list", "edit", "alice", "1", "Oat milk"])
        assert result.exit_code == 2

    def test_remove_wrong_owner(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "add", "bob", "Bob", "Jones"])
        _, created = _json(cli_runner, "list", "add", "alice", "Milk")
        code, data = _json(cli_runner, "list", "remove", "bob", str(created["data"]["id"]))
        assert code == 1
        assert data["error"]["code"] == "NOT_FOUND"

    def test_remove(self, cli_runner: CliRunner) -> None:
        _, created = _json(cli_runner, "list", "add", "alice", "Milk")
        code, data = _json(cli_runner, "list", "remove", "alice", str(created["data"]["id"]))
        assert code == 0
        assert data["data"]["deleted_favor"] is False

        _, shown = _json(cli_runner, "list", "show", "alice")
        assert shown["data"]["count"] == 0
