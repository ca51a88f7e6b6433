"""Command group: a user's own shopping list (``groupcart list``).

Named ``item`` to avoid shadowing the ``list`` builtin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcGroup
from groupcart.domain.models import MAX_PRIORITY, MIN_PRIORITY
from groupcart.services.items import ListService

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext

_PRIORITY = click.IntRange(MIN_PRIORITY, MAX_PRIORITY)


@click.group(
    "list",
    cls=GcGroup,
    examples="""\
  groupcart list show alice
  groupcart list add alice Milk --priority 1
  groupcart list edit alice 3 "Oat milk" --priority 2
  groupcart list remove alice 3""",
)
@click.pass_obj
def list_group(app: AppContext) -> None:
    """Manage the items on a user's list."""


@list_group.command(
    examples="""\
  groupcart list show alice
  groupcart -v list show alice"""
)
@click.argument("username")
@click.pass_obj
def show(app: AppContext, username: str) -> None:
    """Show USERNAME's items with who bought them."""
    app.emit(ListService(app.store).get_list(username))


@list_group.command(
    examples="""\
  groupcart list add alice Milk
  groupcart list add alice Bread --priority 1"""
)
@click.argument("username")
@click.argument("item_name")
@click.option(
    "-p",
    "--priority",
    type=_PRIORITY,
    default=MAX_PRIORITY,
    show_default=True,
    help="1 is most urgent.",
)
@click.pass_obj
def add(app: AppContext, username: str, item_name: str, priority: int) -> None:
    """Add ITEM_NAME to USERNAME's list."""
    app.emit(ListService(app.store).create_item(username, item_name, priority))


@list_group.command(
    examples="""\
  groupcart list edit alice 3 "Oat milk" --priority 2"""
)
@click.argument("username")
@click.argument("item_id", type=int)
@click.argument("item_name")
@click.option("-p", "--priority", type=_PRIORITY, required=True, help="1 is most urgent.")
@click.pass_obj
def edit(app: AppContext, username: str, item_id: int, item_name: str, priority: int) -> None:
    """Rename and reprioritize one of USERNAME's items."""
    app.emit(ListService(app.store).update_item(item_id, username, item_name, priority))


@list_group.command(
    examples="""\
  groupcart list remove alice 3"""
)
@click.argument("username")
@click.argument("item_id", type=int)
@click.pass_obj
def remove(app: AppContext, username: str, item_id: int) -> None:
    """Delete one of USERNAME's items and its favor."""
    app.emit(ListService(app.store).delete_item(item_id, username))
