"""Command group: users and their display settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from groupcart.commands._base import GcGroup
from groupcart.services.users import UserService

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext

_USER_EXAMPLES = """\
  groupcart user add alice Alice Smith
  groupcart user show alice
  groupcart user edit alice --color '#00ff00' --group dev-team
  groupcart user remove alice"""


@click.group(cls=GcGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Create, inspect, edit, and remove users."""


@user.command(
    examples="""\
  groupcart user add alice Alice Smith
  groupcart --json user add bob Bob Jones"""
)
@click.argument("username")
@click.argument("first_name")
@click.argument("last_name")
@click.pass_obj
def add(app: AppContext, username: str, first_name: str, last_name: str) -> None:
    """Create a user with a unique USERNAME."""
    app.emit(UserService(app.store).create_user(username, first_name, last_name))


@user.command(
    examples="""\
  groupcart user show alice
  groupcart --json user show alice"""
)
@click.argument("username")
@click.pass_obj
def show(app: AppContext, username: str) -> None:
    """Show a user's names, color, and group."""
    app.emit(UserService(app.store).get_user(username))


@user.command(
    examples="""\
  groupcart user edit alice --first-name Alicia
  groupcart user edit alice --color 00ff00
  groupcart user edit alice --group dev-team"""
)
@click.argument("username")
@click.option("--first-name", default=None, help="New first name.")
@click.option("--last-name", default=None, help="New last name.")
@click.option("--color", default=None, help="Display color as 6 hex digits, '#' optional.")
@click.option("--group", "group_id", default=None, help="Move the user into this group.")
@click.pass_obj
def edit(
    app: AppContext,
    username: str,
    first_name: str | None,
    last_name: str | None,
    color: str | None,
    group_id: str | None,
) -> None:
    """Change only the supplied fields of a user."""
    changes: dict[str, Any] = {}
    if first_name is not None:
        changes["first_name"] = first_name
    if last_name is not None:
        changes["last_name"] = last_name
    if color is not None:
        changes["color"] = color
    if group_id is not None:
        changes["group_id"] = group_id

    app.emit(UserService(app.store).update_user(username, changes))


@user.command(
    examples="""\
  groupcart user remove alice"""
)
@click.argument("username")
@click.pass_obj
def remove(app: AppContext, username: str) -> None:
    """Delete a user with their items and every favor touching them."""
    app.emit(UserService(app.store).delete_user(username))
