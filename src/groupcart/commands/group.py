"""Command group: user groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcGroup
from groupcart.services.groups import GroupService

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext


@click.group(
    cls=GcGroup,
    examples="""\
  groupcart group create dev-team "Dev Team" -u alice -u bob
  groupcart group show dev-team""",
)
@click.pass_obj
def group(app: AppContext) -> None:
    """Create and inspect groups."""


@group.command(
    examples="""\
  groupcart group create flat-3 "Flat 3"
  groupcart group create dev-team "Dev Team" -u alice -u bob"""
)
@click.argument("group_id")
@click.argument("name")
@click.option("-u", "--user", "usernames", multiple=True, help="Initial member (repeatable).")
@click.pass_obj
def create(app: AppContext, group_id: str, name: str, usernames: tuple[str, ...]) -> None:
    """Create GROUP_ID and move the listed users into it, all or nothing."""
    app.emit(GroupService(app.store).create_group(group_id, name, list(usernames)))


@group.command(
    examples="""\
  groupcart group show dev-team
  groupcart --json group show dev-team"""
)
@click.argument("group_id")
@click.pass_obj
def show(app: AppContext, group_id: str) -> None:
    """Show a group's members and their colors."""
    app.emit(GroupService(app.store).get_group(group_id))
