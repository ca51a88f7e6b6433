"""Command: bring the database schema to the latest revision."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcCommand

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext

_UPGRADE_EXAMPLES = """\
  groupcart upgrade --check
  groupcart upgrade
  groupcart --db sqlite:////srv/groupcart/groupcart.db upgrade"""


@click.command("upgrade", cls=GcCommand, examples=_UPGRADE_EXAMPLES)
@click.option("--check", "dry_run", is_flag=True, help="Only list pending revisions.")
@click.pass_obj
def upgrade(app: AppContext, dry_run: bool) -> None:
    """Apply pending schema revisions (stamping databases created before versioning)."""
    from groupcart.services.upgrade import UpgradeService

    service = UpgradeService(app.store)
    result = service.check_pending() if dry_run else service.apply()
    app.emit(result)
