"""groupcart subcommands.

Command modules are imported by :func:`register_commands` rather than at
package import, so ``groupcart.commands._base`` and ``_context`` stay cheap
to import on their own.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute) in the order they appear in ``groupcart --help``.
_COMMANDS: tuple[tuple[str, str], ...] = (
    ("groupcart.commands.user", "user"),
    ("groupcart.commands.group", "group"),
    ("groupcart.commands.item", "list_group"),
    ("groupcart.commands.favor", "favor"),
    ("groupcart.commands.shop", "shop"),
    ("groupcart.commands.init_cmd", "init_cmd"),
    ("groupcart.commands.upgrade", "upgrade"),
)


def register_commands(cli: click.Group) -> None:
    """Attach the four command groups and three standalone commands to *cli*."""
    for module_name, attr in _COMMANDS:
        cli.add_command(getattr(import_module(module_name), attr))
