"""Rich renderers for CommandResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are chosen by the shape of ``result.value``: document lists
become tables, single documents and write statuses become key-value
fields, scalars a single line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from mongochan.domain.types import NOT_FOUND, WriteStatus
from mongochan.output.console import create_console, get_output
from mongochan.output.formatters import dumps

if TYPE_CHECKING:
    from rich.console import Console

    from mongochan.services.result import CommandResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: CommandResult, *, verbose: bool = False, max_rows: int = 50) -> str:
    """Render a CommandResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if not result.ok:
        _render_error(result, console, verbose=verbose)
        return get_output(console).rstrip("\n")

    _status_line(console, result)
    value = result.value
    if value is NOT_FOUND:
        console.print(Text("  no matching document", style="mc.muted"))
    elif isinstance(value, WriteStatus):
        for key, val in value.model_dump().items():
            _field(console, key, val)
    elif isinstance(value, list):
        _render_documents(console, value, max_rows=max_rows)
    elif isinstance(value, Mapping):
        for key, val in value.items():
            _field(console, str(key), val)
    elif value is not None:
        _field(console, "value", value)

    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: CommandResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    value = result.value
    if isinstance(value, list):
        return "\n".join(_extract_id(item) for item in value if _extract_id(item))
    if isinstance(value, Mapping):
        return _extract_id(value) or f"OK: {result.op}"
    if isinstance(value, (int, str)):
        return str(value)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract ``_id`` from a document."""
    if isinstance(item, Mapping) and item.get("_id") is not None:
        return str(item["_id"])
    return ""


def _cell(value: Any) -> str:
    if isinstance(value, (Mapping, list)):
        return dumps(value)
    return str(value)


def _status_line(console: Console, result: CommandResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="mc.ok")
    op = Text(f"  {result.op}", style="mc.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="mc.key")
    style = "mc.id" if key == "_id" or key.endswith("_id") else ""
    console.print(k, Text(_cell(value), style=style), end="")
    console.print()


def _render_documents(console: Console, docs: list[Any], *, max_rows: int) -> None:
    """Render a document list as a table over the union of their keys."""
    if not docs:
        console.print(Text("  0 documents", style="mc.muted"))
        return

    columns: list[str] = []
    for doc in docs:
        if isinstance(doc, Mapping):
            columns.extend(str(k) for k in doc if str(k) not in columns)

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for col in columns:
        table.add_column(col, style="mc.id" if col == "_id" else None, no_wrap=col == "_id")
    for doc in docs[:max_rows]:
        if isinstance(doc, Mapping):
            table.add_row(*(_cell(doc[c]) if c in doc else "" for c in columns))
    console.print(table)

    summary = f"  {len(docs)} document{'s' if len(docs) != 1 else ''}"
    if len(docs) > max_rows:
        summary += f" ({max_rows} shown)"
    console.print(Text(summary, style="mc.muted"))


def _render_meta(console: Console, result: CommandResult) -> None:
    """Print meta block including the telemetry span (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            duration = v.get("duration_ms", 0.0)
            console.print(f"    [dim]{duration:>8.2f}ms[/dim]  {v.get('name', '?')}")
        else:
            console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: CommandResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="mc.error")
    op = Text(f"  {result.op}", style="mc.op")
    console.print(label, op, Text(" — "), Text(msg))
    if verbose and err is not None:
        console.print(Text(f"  code: {err.code}", style="mc.key"))
        for key, val in err.detail.items():
            console.print(Text(f"  {key}: {val}", style="mc.key"))
