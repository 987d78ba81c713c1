"""Rich/JSON output for CommandResult.

Rows print as a table for humans; ``--json`` dumps the whole result with
the same serializer the substring assertions use.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from ormassert.matching import serialize_rows
from ormassert.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ormassert.output.result import CommandResult


def format_result(result: CommandResult, *, json_output: bool = False) -> str:
    """Format a CommandResult for display."""
    if json_output:
        return serialize_rows(result.model_dump(), indent=2)

    console = create_console()
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        console.print(Text.assemble(("ERROR", "oa.fail"), f": {result.op} — {message}"))
    elif result.op == "rows":
        _render_rows(result.data, console)
    else:
        _render_generic(result, console)
    return get_output(console).rstrip("\n")


def _render_rows(data: dict[str, Any], console: Console) -> None:
    rows: list[dict[str, Any]] = data.get("rows", [])
    entity = data.get("entity", "")
    if not rows:
        console.print(f"No {entity} rows.")
        return

    columns: list[str] = []
    for row in rows:
        columns.extend(key for key in row if key not in columns)

    table = Table(title=f"{entity} ({len(rows)} row{'s' if len(rows) != 1 else ''})")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    console.print(table)


def _cell(value: Any) -> Text:
    if value is None:
        return Text("NULL", style="oa.null")
    if isinstance(value, (dict, list)):
        return Text(serialize_rows(value))
    if isinstance(value, enum.Enum):
        return Text(str(value.value))
    return Text(str(value))


def _render_generic(result: CommandResult, console: Console) -> None:
    console.print(Text.assemble(("OK", "oa.ok"), ": ", (result.op, "oa.op")))
    for key, value in result.data.items():
        shown = serialize_rows(value) if isinstance(value, (dict, list)) else str(value)
        console.print(Text.assemble("  ", (f"{key}:", "oa.key"), f" {shown}"))
