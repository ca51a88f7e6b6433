"""Human-readable rendering of ServiceResult, one renderer per operation.

Renderers draw onto a StringIO-backed Rich console from
:func:`create_console`; :func:`render_result` returns the captured text.
Operations without a registered renderer print their data as
``key: value`` lines.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from groupcart.output.console import (
    create_console,
    get_output,
    style_for_priority,
    style_for_state,
)

if TYPE_CHECKING:
    from rich.console import Console

    from groupcart.services.result import ServiceResult

Renderer = Callable[["Console", "ServiceResult", bool], None]

_RENDERERS: dict[str, Renderer] = {}

# Field styles by key; ids are matched by suffix in _value_text.
_KEY_STYLES: dict[str, str] = {
    "username": "gc.user",
    "owner": "gc.user",
    "by_user": "gc.user",
    "for_user": "gc.user",
    "item": "gc.item",
    "amount": "gc.amount",
}

# Mutation payload keys worth showing, in display order.
_MUTATION_KEYS = (
    "id",
    "username",
    "name",
    "item",
    "item_id",
    "priority",
    "owner",
    "by_user",
    "for_user",
    "amount",
    "reimbursed",
    "state",
    "previous_state",
    "group_id",
    "users",
    "deleted_items",
    "deleted_favors",
    "deleted_favor",
)


def _renders(*ops: str) -> Callable[[Renderer], Renderer]:
    def register(fn: Renderer) -> Renderer:
        for op in ops:
            _RENDERERS[op] = fn
        return fn

    return register


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* as text; plain (no ANSI) when stdout is not a terminal."""
    console = create_console()
    if not result.ok:
        _draw_error(console, result, verbose)
    else:
        _RENDERERS.get(result.op, _draw_generic)(console, result, verbose)
        if verbose and result.meta:
            _draw_meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per listed row (its id or item name), else an OK/ERROR line."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {message}"

    rows = result.data.get("items")
    if isinstance(rows, list) and rows:
        keys = [_row_key(row) for row in rows]
        return "\n".join(k for k in keys if k)
    return f"OK: {result.op}"


def _row_key(row: Any) -> str:
    if not isinstance(row, dict):
        return ""
    value = row.get("id", row.get("item"))
    return "" if value is None else str(value)


# ── Building blocks ──────────────────────────────────────────────────


def _value_text(key: str, value: Any) -> Text:
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, separators=(",", ":")))
    if key == "state":
        return Text(str(value), style=style_for_state(str(value)))
    if key == "id" or key.endswith("_id"):
        return Text(str(value), style="gc.id")
    if key == "amount" and isinstance(value, (int, float)):
        return Text(f"{value:.2f}", style="gc.amount")
    return Text(str(value), style=_KEY_STYLES.get(key, ""))


def _kv(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "gc.key"), _value_text(key, value)))


def _ok_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "gc.ok"), (f"  {result.op}", "gc.op")))


def _table(*columns: tuple[str, dict[str, Any]]) -> Table:
    table = Table(show_header=True, pad_edge=False)
    for header, options in columns:
        table.add_column(header, **options)
    return table


def _draw_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            console.print(_span_tree(value), soft_wrap=True)
        else:
            console.print(f"    {key}: {value}")


def _span_label(span: dict[str, Any]) -> Text:
    duration = float(span.get("duration_ms", 0.0))
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    label = Text.assemble((f"{duration:8.2f}ms", style), f"  {span.get('name', '?')}")
    notes = span.get("annotations")
    if notes:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")", "dim")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    """Telemetry span dict (see ``Span.to_dict``) as a Rich tree."""
    label = _span_label(span)
    node = Tree(label, guide_style="dim") if tree is None else tree.add(label)
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


# ── Errors and mutations ─────────────────────────────────────────────


def _draw_error(console: Console, result: ServiceResult, verbose: bool) -> None:
    error = result.error
    console.print(
        Text.assemble(
            ("ERROR", "gc.error"),
            (f"  {result.op}", "gc.op"),
            (f" [{error.code}]" if error else "", "dim"),
            " - ",
            error.message if error else "Unknown error",
        )
    )
    if verbose and error and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(f"    {key}: {value}")


@_renders(
    "create_user",
    "update_user",
    "delete_user",
    "create_group",
    "create_item",
    "update_item",
    "delete_item",
    "create_favor",
    "update_favor",
)
def _draw_mutation(console: Console, result: ServiceResult, verbose: bool) -> None:
    _ok_line(console, result)
    data = result.data
    for key in _MUTATION_KEYS:
        if data.get(key) is not None:
            _kv(console, key, data[key])
    if "fields_changed" in data:
        _kv(console, "fields_changed", ", ".join(data["fields_changed"]))


# ── Lookups ──────────────────────────────────────────────────────────


@_renders("get_user")
def _draw_user(console: Console, result: ServiceResult, verbose: bool) -> None:
    data = result.data
    full_name = f"{data.get('first_name', '')} {data.get('last_name', '')}".strip()
    console.print(Text.assemble((data.get("username", "?"), "gc.user"), f"  {full_name}"))
    for key in ("id", "group_id", "color"):
        if data.get(key) is not None:
            _kv(console, key, data[key])


@_renders("get_group")
def _draw_group(console: Console, result: ServiceResult, verbose: bool) -> None:
    data = result.data
    members: list[str] = data.get("users", [])
    colors: dict[str, str] = data.get("user_colors", {})
    heading = Text(data.get("name", "?"), style="bold")
    heading.append(f"  ({data.get('id')})", style="gc.id")
    console.print(heading)
    for username in members:
        swatch = (" ●", colors[username]) if username in colors else ""
        console.print(Text.assemble((f"  {username}", "gc.user"), swatch))
    console.print(f"\n{len(members)} members")


@_renders("get_list")
def _draw_list(console: Console, result: ServiceResult, verbose: bool) -> None:
    rows = result.data.get("items", [])
    columns = [
        ("ID", {"style": "gc.id", "no_wrap": True}),
        ("Item", {"style": "gc.item"}),
        ("Priority", {"justify": "right"}),
        ("State", {}),
        ("Bought by", {"style": "gc.user"}),
    ]
    if verbose:
        columns.append(("Added", {"style": "dim"}))
    table = _table(*columns)

    for row in rows:
        priority = row.get("priority", 0)
        cells: list[Any] = [
            str(row.get("id", "")),
            row.get("item", ""),
            Text(str(priority), style=style_for_priority(priority)),
            _value_text("state", row.get("state", "")),
            row.get("fulfilled_by") or "",
        ]
        if verbose:
            cells.append(row.get("added_at", ""))
        table.add_row(*cells)

    console.print(Text.assemble("List for ", (result.data.get("username", "?"), "gc.user")))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(rows))} items")


@_renders("favors_for", "favors_by")
def _draw_favors(console: Console, result: ServiceResult, verbose: bool) -> None:
    rows = result.data.get("items", [])
    columns = [
        ("ID", {"style": "gc.id", "no_wrap": True}),
        ("Item", {"style": "gc.item"}),
        ("By", {"style": "gc.user"}),
        ("For", {"style": "gc.user"}),
        ("Amount", {"justify": "right"}),
        ("State", {}),
    ]
    if verbose:
        columns += [("Fulfilled", {"style": "dim"}), ("Reimbursed", {"style": "dim"})]
    table = _table(*columns)

    amounts = [float(row.get("amount", 0.0)) for row in rows]
    outstanding = sum(a for a, row in zip(amounts, rows, strict=True) if not row.get("reimbursed"))
    for amount, row in zip(amounts, rows, strict=True):
        cells: list[Any] = [
            str(row.get("id", "")),
            row.get("item", ""),
            row.get("by_user", ""),
            row.get("for_user", ""),
            _value_text("amount", amount),
            _value_text("state", row.get("state", "")),
        ]
        if verbose:
            cells += [row.get("fulfilled_at", ""), row.get("reimbursed_at") or ""]
        table.add_row(*cells)

    direction = "for" if result.data.get("direction") == "for" else "by"
    username = result.data.get("username", "?")
    console.print(Text.assemble(f"Favors {direction} ", (username, "gc.user")))
    console.print(table)
    console.print(
        f"\n{result.data.get('count', len(rows))} favors, "
        f"total {sum(amounts):.2f}, outstanding {outstanding:.2f}"
    )


@_renders("build_shopping_list")
def _draw_shopping_list(console: Console, result: ServiceResult, verbose: bool) -> None:
    entries = result.data.get("items", [])
    if not entries:
        console.print("Nothing to buy.")
        return

    columns = [
        ("Item", {"style": "gc.item"}),
        ("Qty", {"justify": "right"}),
        ("Needed by", {"style": "gc.user"}),
    ]
    if verbose:
        columns.append(("Item IDs", {"style": "gc.id"}))
    table = _table(*columns)

    for entry in entries:
        needed_by: list[str] = entry.get("needed_by", [])
        cells = [entry.get("item", ""), str(len(needed_by)), ", ".join(needed_by)]
        if verbose:
            cells.append(", ".join(map(str, entry.get("item_ids", []))))
        table.add_row(*cells)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(entries))} distinct items")


# ── Database maintenance ─────────────────────────────────────────────


@_renders("init")
def _draw_init(console: Console, result: ServiceResult, verbose: bool) -> None:
    _ok_line(console, result)
    data = result.data
    _kv(console, "database", data.get("database", "?"))
    _kv(console, "revision", data.get("revision") or "none")
    _kv(console, "tables", ", ".join(data.get("tables", [])))


@_renders("upgrade", "stamp")
def _draw_upgrade(console: Console, result: ServiceResult, verbose: bool) -> None:
    _ok_line(console, result)
    data = result.data
    for key in ("applied_count", "pending_count", "current", "head", "message"):
        if key in data:
            _kv(console, key, data[key])
    if verbose:
        for revision in data.get("pending", []):
            console.print(f"  {revision['revision']}: {revision['description']}")


def _draw_generic(console: Console, result: ServiceResult, verbose: bool) -> None:
    _ok_line(console, result)
    for key, value in result.data.items():
        _kv(console, key, value)
