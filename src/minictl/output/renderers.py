"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from minictl.output.console import RenderBuffer, style_for_property

if TYPE_CHECKING:
    from rich.console import Console

    from minictl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    buffer = RenderBuffer()
    console = buffer.console
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    if verbose:
        _render_meta(console, result)
    return buffer.text()


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: the config file path after a start."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "start":
        return str(result.data.get("config_file", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="mini.ok"), Text(f"  {result.op}", style="mini.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = "mini.path" if key.endswith("file") else ""
    console.print(Text(f"  {key}: ", style="mini.key"), Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    telemetry = result.meta.get("telemetry")
    if telemetry:
        console.print(Text("  timing:", style="dim"))
        _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    console.print(f"{' ' * indent}{span.get('name', '?')}  {span.get('duration_ms', 0.0)}ms")
    for child in span.get("children", []):
        _render_span(console, child, indent + 2)


# ── Per-op renderers ──────────────────────────────────────────────────


def _render_start(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "config_file", data.get("config_file", ""))
    _field(console, "mapreduce_enabled", data.get("mapreduce_enabled", False))
    classpath = data.get("classpath") or {}
    if classpath:
        entries = classpath.get("entries", 0)
        _field(console, "classpath", f"{entries} entries in ${classpath.get('env_var', '')}")

    properties: dict[str, str] = data.get("properties") or {}
    if properties:
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("property", style="mini.key")
        table.add_column("value")
        for key, value in properties.items():
            table.add_row(key, Text(value, style=style_for_property(key)))
        console.print(table)
    _render_warnings(console, result)


def _render_stop(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    if result.data.get("stopped"):
        _field(console, "cluster", "stopped")
    else:
        _field(console, "cluster", f"not running ({result.data.get('state', 'unknown')})")
    _render_warnings(console, result)


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    _render_warnings(console, result)


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  WARNING: ", style="mini.warning"), Text(warning), sep="")


def _render_error(result: ServiceResult, console: Console) -> None:
    error = result.error
    msg = error.message if error else "Unknown error"
    console.print(
        Text("ERROR", style="mini.error"),
        Text(f"  {result.op}", style="mini.op"),
        Text(f" — {msg}"),
    )
    if error is None:
        return
    console.print(Text(f"  code: {error.code}", style="mini.key"))
    cause = error.detail.get("cause")
    if cause:
        cause_type = error.detail.get("cause_type", "")
        label = f"{cause_type}: {cause}" if cause_type else cause
        console.print(Text(f"  cause: {label}"))


_OP_RENDERERS: dict[str, Renderer] = {
    "start": _render_start,
    "stop": _render_stop,
}
