"""Rich Console factory and theme for ormassert output.

Consoles render into a StringIO buffer so formatters return plain
strings. In non-TTY environments (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ORMASSERT_THEME = Theme(
    {
        "oa.ok": "bold green",
        "oa.fail": "bold red",
        "oa.op": "bold cyan",
        "oa.key": "dim",
        "oa.null": "dim italic",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=ORMASSERT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
