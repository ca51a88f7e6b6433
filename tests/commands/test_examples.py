"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from groupcart.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    # -- user --
    (["user", "--examples"], ["groupcart user add", "groupcart user remove"]),
    (["user", "add", "--examples"], ["groupcart user add alice"]),
    (["user", "show", "--examples"], ["groupcart user show"]),
    (["user", "edit", "--examples"], ["--color", "--group"]),
    (["user", "remove", "--examples"], ["groupcart user remove"]),
    # -- group --
    (["group", "--examples"], ["groupcart group create", "groupcart group show"]),
    (["group", "create", "--examples"], ["-u alice"]),
    (["group", "show", "--examples"], ["groupcart group show"]),
    # -- list --
    (["list", "--examples"], ["groupcart list show", "groupcart list add"]),
    (["list", "show", "--examples"], ["groupcart list show alice"]),
    (["list", "add", "--examples"], ["--priority 1"]),
    (["list", "edit", "--examples"], ["--priority 2"]),
    (["list", "remove", "--examples"], ["groupcart list remove"]),
    # -- favor --
    (["favor", "--examples"], ["groupcart favor create", "groupcart favor for"]),
    (["favor", "create", "--examples"], ["--amount"]),
    (["favor", "update", "--examples"], ["--reimbursed", "--not-reimbursed"]),
    (["favor", "for", "--examples"], ["groupcart favor for alice"]),
    (["favor", "by", "--examples"], ["groupcart favor by"]),
    # -- standalone commands --
    (["shop", "--examples"], ["groupcart shop"]),
    (["init", "--examples"], ["groupcart init"]),
    (["upgrade", "--examples"], ["upgrade --check"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    ("args", "keywords"),
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


def test_examples_not_in_help_body(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["shop", "--help"])
    assert result.exit_code == 0
    assert "--examples" in result.output
    assert "groupcart -v shop" not in result.output
