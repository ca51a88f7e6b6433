"""Rich theme plus a console that records into memory.

Renderers never write to the terminal directly; they draw on a console
backed by ``StringIO`` and hand the text back to the formatter. Rich
drops ANSI codes on its own when the real stdout is not a TTY.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GROUPCART_THEME = Theme(
    {
        "gc.ok": "bold green",
        "gc.error": "bold red",
        "gc.warning": "bold yellow",
        "gc.op": "bold cyan",
        "gc.key": "dim",
        "gc.id": "bold blue",
        "gc.item": "bold",
        "gc.user": "magenta",
        "gc.amount": "green",
        "gc.state.pending": "yellow",
        "gc.state.fulfilled": "cyan",
        "gc.state.reimbursed": "green",
    }
)

# Lower number is more urgent.
_PRIORITY_STYLES: dict[int, str] = {1: "bold red", 2: "yellow", 3: "dim"}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """In-memory console; *width* defaults to 120 columns so tables do not wrap."""
    return Console(
        file=StringIO(),
        theme=GROUPCART_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()


def style_for_state(state: str) -> str:
    """Theme style for a ledger state name, or no style for anything else."""
    style = f"gc.state.{state}"
    return style if style in GROUPCART_THEME.styles else ""


def style_for_priority(priority: int) -> str:
    return _PRIORITY_STYLES.get(priority, "")
