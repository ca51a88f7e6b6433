"""``groupcart`` entry point: global flags, settings, and subcommands."""

from __future__ import annotations

import click

from groupcart import __version__
from groupcart.commands import register_commands
from groupcart.commands._base import GcGroup
from groupcart.commands._context import AppContext
from groupcart.config.settings import GroupCartSettings

_CLI_EXAMPLES = """\
  groupcart init
  groupcart user add alice Alice Smith
  groupcart list add alice Milk --priority 1
  groupcart shop
  groupcart --json favor for alice"""


@click.group(cls=GcGroup, examples=_CLI_EXAMPLES, invoke_without_command=True)
@click.version_option(__version__, prog_name="groupcart")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids or OK/ERROR lines only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing spans.")
@click.option("--log-json", is_flag=True, help="Write log records to stderr as JSON.")
@click.option(
    "-c", "--config", "config_path", type=click.Path(dir_okay=False), help="groupcart.toml to use."
)
@click.option("--db", "db_url", metavar="URL", help="SQLAlchemy URL of the database.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    db_url: str | None,
) -> None:
    """Shared shopping lists, one consolidated trip list, and the favors that pay for it."""
    settings = GroupCartSettings.from_cli(
        config_path=config_path,
        db_url=db_url,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    # Disposes the engine once the subcommand has finished.
    ctx.call_on_close(app.close)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
