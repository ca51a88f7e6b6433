"""Tests for the init and upgrade commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from groupcart.cli import cli


@pytest.mark.usefixtures("_isolated_root")
class TestInitCommand:
    def test_creates_database(self, cli_runner: CliRunner, data_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["revision"] == "001_baseline"
        assert "favors" in data["tables"]
        assert (data_root / ".groupcart" / "groupcart.db").is_file()

    def test_idempotent(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["init"]).exit_code == 0
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "001_baseline" in result.output

    def test_db_override(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "cart.db"
        result = cli_runner.invoke(cli, ["--db", f"sqlite:///{target}", "init"])
        assert result.exit_code == 0
        assert target.is_file()
        assert not (tmp_path / ".groupcart" / "groupcart.db").exists()


@pytest.mark.usefixtures("_isolated_root")
class TestUpgradeCommand:
    def test_check_after_init(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "upgrade", "--check"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["pending_count"] == 0
        assert data["head"] == "001_baseline"

    def test_up_to_date(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["upgrade"])
        assert result.exit_code == 0
        assert "already up to date" in result.output

    def test_unstamped_schema_is_stamped(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["user", "add", "alice", "Alice", "Smith"])
        result = cli_runner.invoke(cli, ["--json", "upgrade"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["data"]["current"] == "001_baseline"
        assert payload["warnings"]
