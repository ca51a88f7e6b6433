"""AppContext — what every groupcart command receives via ``@click.pass_obj``.

It owns the settings of the invocation, opens the :class:`Store` the first
time a command needs it, and turns each ``ServiceResult`` into output and
an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.config.logging import configure_logging
from groupcart.output.formatters import OutputSettings, format_result
from groupcart.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from groupcart.config.settings import GroupCartSettings
    from groupcart.infrastructure.store import Store
    from groupcart.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by the root group and its subcommands."""

    def __init__(self, settings: GroupCartSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._store: Store | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def store(self) -> Store:
        """Opened on first access; ``--help``, ``--version`` and ``--examples`` never open it."""
        if self._store is None:
            from groupcart.infrastructure.store import Store

            self._store = Store(self.settings)
        return self._store

    def close(self) -> None:
        store, self._store = self._store, None
        if store is not None:
            store.close()

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successes go to stdout with any warnings on stderr (JSON output
        already carries them). Failures go to stderr and exit with status 1.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
