"""Command: database initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcCommand

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext

_INIT_EXAMPLES = """\
  groupcart init
  groupcart --db sqlite:////srv/groupcart/groupcart.db init
  groupcart -c ./groupcart.toml init"""


@click.command("init", cls=GcCommand, examples=_INIT_EXAMPLES)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database tables and mark the schema version."""
    from groupcart.services.upgrade import UpgradeService

    app.emit(UpgradeService(app.store).initialize())
