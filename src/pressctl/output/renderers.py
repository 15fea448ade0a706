"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pressctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from pressctl.services.result import ServiceResult

_ERROR_CELL = "#ERROR"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if _has_id(item))
    if result.data.get("id") is not None:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _has_id(item: Any) -> bool:
    return isinstance(item, dict) and item.get("id") is not None


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="press.ok")
    op = Text(f"  {result.op}", style="press.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="press.key")
    if isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    elif key == "id" or key.endswith("_id"):
        v = Text(str(value), style="press.id")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k + v)


def _cell(value: Any) -> Text:
    if value is None:
        return Text("")
    if value == _ERROR_CELL:
        return Text(_ERROR_CELL, style="press.marker")
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    return Text(str(value))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="press.error")
    op = Text(f"  {result.op}", style="press.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err and err.detail.get("errors"):
        for field_error in err.detail["errors"]:
            console.print(
                f"    {field_error['field']}: {field_error['rule']}"
                + (f" ({field_error['message']})" if field_error.get("message") else "")
            )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "errors":
                console.print(f"    {k}: {v}")


# ── Record renderers ──────────────────────────────────────────────────


def _render_record(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/get results: attributes, then content, then associations."""
    _status_line(console, result)
    data = result.data
    for key in ("id", "entity", "status", "publish_at", "created_at", "updated_at"):
        if data.get(key) is not None:
            _field(console, key, data[key])
    if data.get("fields_changed"):
        _field(console, "fields_changed", ", ".join(data["fields_changed"]))
    for key, value in (data.get("content") or {}).items():
        _field(console, key, value)
    for name, members in (data.get("associations") or {}).items():
        _field(console, name, ", ".join(members) if members else "—")


def _render_listing(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a projected list view as a table shaped by its column specs."""
    data = result.data
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    columns: list[dict[str, Any]] = data.get("columns", [])
    for col in columns:
        table.add_column(
            col.get("label") or col["name"],
            justify=col.get("align", "left"),
            no_wrap=col["name"] == "id",
        )
    for item in data.get("items", []):
        table.add_row(*(_cell(item.get(col["name"])) for col in columns))

    _status_line(console, result)
    if data.get("items"):
        console.print(table)
    total = data.get("total", data.get("count", 0))
    console.print(Text(f"  {data.get('count', 0)} of {total} shown", style="press.key"))
    if verbose and result.meta:
        for k, v in result.meta.items():
            console.print(f"    {k}: {v}")


def _render_form(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render editor form state section by section."""
    _status_line(console, result)
    data = result.data
    _field(console, "entity", data.get("entity"))
    if data.get("id") is not None:
        _field(console, "id", data["id"])
    for section, entries in (data.get("sections") or {}).items():
        if not entries:
            continue
        console.print(Text(f"  [{section}]", style="press.op"))
        for entry in entries:
            marker = "*" if entry.get("required") else " "
            value = entry.get("value")
            shown = "" if value is None else value
            label = f"{marker}{entry['name']} ({entry['kind']})"
            _field(console, label, shown)
            if verbose and entry.get("options"):
                _field(console, "  options", entry["options"])


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a schema description: fields table, then columns."""
    _status_line(console, result)
    data = result.data
    for key in ("entity", "name", "description", "title"):
        if data.get(key):
            _field(console, key, data[key])

    fields = Table(show_header=True, pad_edge=False, title="Fields", title_justify="left")
    for heading in ("Name", "Kind", "Section", "Required", "Max"):
        fields.add_column(heading)
    for f in data.get("fields", []):
        fields.add_row(
            f["name"],
            f["kind"],
            f["section"],
            "yes" if f["required"] else "",
            str(f["max_length"] or ""),
        )
    console.print(fields)

    if data.get("columns"):
        cols = Table(show_header=True, pad_edge=False, title="Columns", title_justify="left")
        for heading in ("Name", "Label", "Align", "Sortable", "Filter"):
            cols.add_column(heading)
        for c in data["columns"]:
            cols.add_row(
                c["name"],
                c["label"],
                c["align"],
                "yes" if c["sortable"] else "",
                c["filter"] or "",
            )
        console.print(cols)
    if verbose and data.get("rules"):
        _field(console, "rules", data["rules"])


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "create_record": _render_record,
    "update_record": _render_record,
    "get_record": _render_record,
    "edit_form": _render_form,
    "list_records": _render_listing,
    "list_comments": _render_listing,
    "show_schema": _render_schema,
}
