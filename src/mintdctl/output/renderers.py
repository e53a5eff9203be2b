"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`. The
``render`` op never comes through here: its content is written to stdout
byte for byte by ``AppContext.emit_content``.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from mintdctl.output.console import create_console, get_output
from mintdctl.services.result import ErrorCode

if TYPE_CHECKING:
    from rich.console import Console

    from mintdctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS[result.op]
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
    """Print the OK/ERROR status line."""
    console.print(Text.assemble(("OK", "mintd.ok"), "  ", (result.op, "mintd.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    line = Text.assemble((f"  {key}: ", "mintd.key"))
    if key.endswith("_path") or key.endswith("_dir") or key.endswith("_file"):
        line.append(str(value), style="mintd.path")
    elif isinstance(value, (dict, list)):
        line.append(_json.dumps(value, separators=(",", ":")))
    else:
        line.append(str(value))
    console.print(line)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "mintd.error"), "  ", (result.op, "mintd.op"), ": ", msg)
    )

    if err and err.code == ErrorCode.VALIDATION_FAILED:
        for error in err.detail.get("errors", []):
            console.print(Text.assemble("  ", ("-", "mintd.error"), " ", error["message"]))
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print("[mintd.ok]OK[/mintd.ok]  All required settings present.")


def _render_artifacts(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render plan/deploy results: summary fields plus an artifact table."""
    _status_line(console, result)
    if result.data.get("enabled") is False:
        _field(console, "enabled", False)
        return

    for key in ("artifact_dir", "config_path", "environment_file"):
        value = result.data.get(key)
        if value is not None:
            _field(console, key, value)
    _field(console, "argv", " ".join(result.data.get("argv", [])))
    ports = result.data.get("allowed_tcp_ports")
    if ports:
        _field(console, "allowed_tcp_ports", ", ".join(str(p) for p in ports))

    artifacts = result.data.get("artifacts", [])
    if not artifacts:
        return
    show_changed = any("changed" in a for a in artifacts)
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Kind", style="mintd.kind")
    table.add_column("Path", style="mintd.path")
    if show_changed:
        table.add_column("Changed")
    for artifact in artifacts:
        row = [artifact["kind"], artifact["path"]]
        if show_changed:
            row.append("[mintd.changed]yes[/mintd.changed]" if artifact.get("changed") else "no")
        table.add_row(*row)
    console.print()
    console.print(table)
    if "changed" in result.data:
        console.print(f"\n{result.data['changed']} of {len(artifacts)} artifacts changed")


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "plan": _render_artifacts,
    "deploy": _render_artifacts,
}
