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

from formkit.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from formkit.services.result import ServiceResult


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

    fields = result.data.get("fields")
    if fields and isinstance(fields, list):
        return "\n".join(str(f.get("id", "")) for f in fields if isinstance(f, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="fk.ok")
    op = Text(f"  {result.op}", style="fk.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="fk.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="fk.id")
    elif key == "title":
        v = Text(str(value), style="fk.title")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _describe_condition(row: dict[str, Any]) -> str:
    condition = row.get("condition")
    if not condition:
        return ""
    parts: list[str] = []
    if condition.get("has_value") is not None:
        parts.append("has value" if condition["has_value"] else "is empty")
    match = condition.get("match") or {}
    if match.get("kind", "none") != "none":
        parts.append(f"= {json.dumps(match.get('value'))}")
    return f"{row.get('linked_field_id')} {' and '.join(parts)}"


def _describe_choices(row: dict[str, Any]) -> str:
    choices = row.get("choices") or []
    return ", ".join(c["label"] for c in choices if not c.get("archived"))


# ── Op renderers ──────────────────────────────────────────────────────


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the field listing as a table in display order."""
    data = result.data
    console.print(Text(str(data.get("title", "")), style="fk.title"), Text(f"  ({data.get('id')})"))
    if data.get("description"):
        console.print(Text(str(data["description"]), style="dim"))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="fk.id", no_wrap=True)
    table.add_column("Label")
    table.add_column("Type")
    table.add_column("Req")
    table.add_column("Shown when")
    if verbose:
        table.add_column("Choices")

    for row in data.get("fields", []):
        field_type = str(row.get("type", ""))
        label_style = "fk.archived" if row.get("archived") else ""
        cells: list[Any] = [
            str(row.get("id", "")),
            Text(str(row.get("label", "")), style=label_style),
            Text(field_type, style=style_for_type(field_type)),
            "yes" if row.get("required") else "",
            _describe_condition(row),
        ]
        if verbose:
            cells.append(_describe_choices(row))
        table.add_row(*cells)

    console.print(table)
    console.print(f"{data.get('count', 0)} fields")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[fk.ok]OK[/fk.ok]  No issues found.")
        return

    severity_styles = {"error": "fk.error", "warning": "fk.warning"}

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        cat = str(issue.get("category", "unknown"))
        by_category.setdefault(cat, []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print(f"\n[bold]{cat}[/bold]")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            field_id = issue.get("field_id")
            fid = f" \\[{field_id}]" if field_id else ""
            console.print(f"  {prefix}{fid}: {issue.get('message', '')}")

    errors = result.data.get("error_count", 0)
    warnings = result.data.get("warning_count", count - errors)
    console.print(f"\n{errors} errors, {warnings} warnings")


def _render_visibility(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render visible/hidden field ids."""
    _status_line(console, result)
    _field(console, "visible", ", ".join(result.data.get("visible", [])) or "-")
    _field(console, "hidden", ", ".join(result.data.get("hidden", [])) or "-")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fk.error")
    op = Text(f"  {result.op}", style="fk.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err is None:
        return
    for key, message in (err.detail.get("errors") or {}).items():
        console.print(Text(f"  {key}: ", style="fk.id"), message)
    if verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "describe": _render_describe,
    "check": _render_check,
    "validate_response": _render_visibility,
    "visible_fields": _render_visibility,
}
