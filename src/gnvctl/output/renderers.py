"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from gnvctl.output.console import create_console, get_output, style_for_collection

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from gnvctl.services.result import ServiceResult


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
        return f"ERROR: {result.op}: {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="gnv.ok")
    op = Text(f"  {result.op}", style="gnv.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gnv.key")
    if isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    elif key in ("manifest", "path"):
        v = Text(str(value), style="gnv.path")
    elif key == "collection":
        v = Text(str(value), style=style_for_collection(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 1000 else "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    attrs = span_data.get("attrs") or {}
    if attrs:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in attrs.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _steps_table(steps: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Step", style="gnv.op", no_wrap=True)
    table.add_column("Status")
    table.add_column("Packages")
    table.add_column("Message", style="dim")
    for step in steps:
        status = str(step.get("status", ""))
        table.add_row(
            str(step.get("step", "")),
            Text(status, style=f"gnv.step.{status}" if status else ""),
            " ".join(step.get("packages", [])),
            str(step.get("message", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    line = Text("ERROR", style="gnv.error")
    line.append(f"  {result.op}", style="gnv.op")
    line.append(f": {msg}")
    console.print(line)

    steps = result.data.get("steps") or result.data.get("install", {}).get("steps")
    if steps:
        console.print(_steps_table(steps))

    if err and err.detail:
        stderr = err.detail.get("stderr")
        if stderr and not verbose:
            console.print(Text(f"  {stderr}", style="dim"))
        if verbose:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_add(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "collection", result.data.get("collection", ""))
    for item in result.data.get("added", []):
        line = Text("  + ")
        line.append(str(item.get("key", "")), style="gnv.package")
        line.append("@")
        line.append(str(item.get("version", "")), style="gnv.version")
        previous = item.get("previous")
        if previous and previous != item.get("version"):
            line.append(f"  (was {previous})", style="dim")
        console.print(line)
    message = result.data.get("message")
    if message:
        console.print(Text(f"  {message}"))

    install = result.data.get("install") or {}
    if install.get("steps"):
        console.print()
        console.print(_steps_table(install["steps"]))
    if install.get("message"):
        console.print(Text(install["message"]))
    if verbose:
        _render_meta(console, result)


def _render_remove(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "collection", result.data.get("collection", ""))
    for key in result.data.get("removed", []):
        line = Text("  - ")
        line.append(str(key), style="gnv.package")
        console.print(line)
    missing = result.data.get("missing", [])
    if missing:
        console.print(Text(f"  not present: {', '.join(missing)}", style="dim"))
    if verbose:
        _render_meta(console, result)


def _render_install(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "mode", result.data.get("mode", ""))
    steps = result.data.get("steps", [])
    if steps:
        console.print(_steps_table(steps))
    if result.data.get("message"):
        console.print(Text(result.data["message"]))
    if verbose:
        _render_meta(console, result)


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "manifest", result.data.get("manifest", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="gnv.package", no_wrap=True)
    table.add_column("Version", style="gnv.version")
    table.add_column("Collection")
    count = 0
    for collection in ("local", "peer"):
        for key, version in (result.data.get(collection) or {}).items():
            table.add_row(key, version, Text(collection, style=style_for_collection(collection)))
            count += 1

    if count:
        console.print(table)
    console.print(f"\n{count} dependencies")
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "add": _render_add,
    "remove": _render_remove,
    "install": _render_install,
    "list": _render_list,
}
