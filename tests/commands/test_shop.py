"""Tests for the shop command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from groupcart.cli import cli
from groupcart.services.telemetry import disable_telemetry


@pytest.mark.usefixtures("_isolated_root")
class TestShopCommand:
    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["shop"])
        assert result.exit_code == 0
        assert "Nothing to buy." in result.output

    def test_consolidates_and_skips_bought(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "add", "alice", "Alice", "Smith"])
        cli_runner.invoke(cli, ["user", "add", "bob", "Bob", "Jones"])
        first = cli_runner.invoke(cli, ["--json", "list", "add", "alice", "Milk"])
        cli_runner.invoke(cli, ["list", "add", "bob", "Milk"])
        cli_runner.invoke(cli, ["list", "add", "bob", "Eggs"])

        result = cli_runner.invoke(cli, ["--json", "shop"])
        assert result.exit_code == 0
        items = json.loads(result.output)["data"]["items"]
        assert [e["item"] for e in items] == ["Eggs", "Milk"]
        assert items[1]["needed_by"] == ["alice", "bob"]

        milk_id = str(json.loads(first.output)["data"]["id"])
        cli_runner.invoke(
            cli, ["favor", "create", milk_id, "--by", "bob", "--for", "alice", "--amount", "1"]
        )
        result = cli_runner.invoke(cli, ["--json", "shop"])
        milk = [e for e in json.loads(result.output)["data"]["items"] if e["item"] == "Milk"]
        assert milk[0]["needed_by"] == ["bob"]

    def test_verbose_shows_telemetry(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "add", "alice", "Alice", "Smith"])
        cli_runner.invoke(cli, ["list", "add", "alice", "Milk"])
        try:
            result = cli_runner.invoke(cli, ["-v", "shop"])
        finally:
            disable_telemetry()
        assert result.exit_code == 0
        assert "Milk" in result.output
        assert "consolidate" in result.output
