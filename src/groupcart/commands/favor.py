"""Command group: the favor ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groupcart.commands._base import GcGroup
from groupcart.services.favors import FavorService

if TYPE_CHECKING:
    from groupcart.commands._context import AppContext

_FAVOR_EXAMPLES = """\
  groupcart favor create 3 --by bob --for alice --amount 2.50
  groupcart favor update 1 --reimbursed --amount 2.50
  groupcart favor for alice
  groupcart favor by bob"""


@click.group(cls=GcGroup, examples=_FAVOR_EXAMPLES)
@click.pass_obj
def favor(app: AppContext) -> None:
    """Record purchases for others and track reimbursement."""


@favor.command(
    examples="""\
  groupcart favor create 3 --by bob --for alice --amount 2.50
  groupcart --json favor create 4 --by alice --for alice --amount 0"""
)
@click.argument("item_id", type=int)
@click.option("--by", "by_username", required=True, help="User who bought the item.")
@click.option("--for", "for_username", required=True, help="User who owns the item.")
@click.option("--amount", type=float, required=True, help="Amount paid.")
@click.pass_obj
def create(
    app: AppContext,
    item_id: int,
    by_username: str,
    for_username: str,
    amount: float,
) -> None:
    """Record that one user bought another's item ITEM_ID."""
    app.emit(FavorService(app.store).create_favor(item_id, by_username, for_username, amount))


@favor.command(
    examples="""\
  groupcart favor update 1 --reimbursed --amount 2.50
  groupcart favor update 1 --not-reimbursed --amount 3.00"""
)
@click.argument("favor_id", type=int)
@click.option(
    "--reimbursed/--not-reimbursed",
    default=None,
    help="Mark or unmark the favor as paid back.",
)
@click.option("--amount", type=float, default=None, help="Amount paid.")
@click.pass_obj
def update(app: AppContext, favor_id: int, reimbursed: bool | None, amount: float | None) -> None:
    """Set FAVOR_ID's amount and reimbursement status."""
    app.emit(FavorService(app.store).update_favor(favor_id, reimbursed, amount))


@favor.command(
    "for",
    examples="""\
  groupcart favor for alice
  groupcart -v favor for alice""",
)
@click.argument("username")
@click.pass_obj
def favors_for(app: AppContext, username: str) -> None:
    """Favors received by USERNAME, newest first."""
    app.emit(FavorService(app.store).favors_for(username))


@favor.command(
    "by",
    examples="""\
  groupcart favor by bob
  groupcart --json favor by bob""",
)
@click.argument("username")
@click.pass_obj
def favors_by(app: AppContext, username: str) -> None:
    """Favors given by USERNAME, newest first."""
    app.emit(FavorService(app.store).favors_by(username))
