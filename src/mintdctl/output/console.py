"""Rich console for human-readable command output.

Output is rendered into a StringIO buffer and handed back as a string, so
``AppContext`` alone decides between stdout and stderr.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MINTDCTL_THEME = Theme(
    {
        "mintd.ok": "bold green",
        "mintd.error": "bold red",
        "mintd.op": "bold cyan",
        "mintd.key": "dim",
        "mintd.path": "dim",
        "mintd.kind": "bold blue",
        "mintd.changed": "yellow",
    }
)

# Wide enough that ExecStart lines and artifact paths are not wrapped.
CONSOLE_WIDTH = 160


def create_console() -> Console:
    return Console(
        file=StringIO(),
        theme=MINTDCTL_THEME,
        highlight=False,
        width=CONSOLE_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text rendered so far into a console from :func:`create_console`."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
