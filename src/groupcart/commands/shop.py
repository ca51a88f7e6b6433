"""Command: the consolidated shopping list."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcCommand

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext


@click.command(
    cls=GcCommand,
    examples="""\
  groupcart shop
  groupcart -v shop
  groupcart --json shop""",
)
@click.pass_obj
def shop(app: AppContext) -> None:
    """Show every unbought item once, with who needs it."""
    from groupcart.services.shop import ShopService

    app.emit(ShopService(app.store).build_shopping_list())
