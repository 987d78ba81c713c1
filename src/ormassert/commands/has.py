"""Command: check whether the database has (or lacks) some data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from ormassert.commands._params import KEY_VALUE
from ormassert.commands._query import fetch_rows, where_customizer
from ormassert.errors import ResultShapeError
from ormassert.matching import serialize_rows
from ormassert.output.result import CommandError, CommandResult

if TYPE_CHECKING:
    from ormassert.commands._context import AppContext


@click.command()
@click.argument("entity")
@click.argument("expected", nargs=-1, type=KEY_VALUE)
@click.option("--contains", default=None, help="Text expected in the serialized rows.")
@click.option("-w", "--where", multiple=True, type=KEY_VALUE, help="Narrow the query first.")
@click.option("--missing", is_flag=True, help="Succeed only when nothing matches.")
@click.option("--manager", default=None, help="Entity manager name.")
@click.pass_obj
def has(
    app: AppContext,
    entity: str,
    expected: tuple[tuple[str, Any], ...],
    contains: str | None,
    where: tuple[tuple[str, Any], ...],
    missing: bool,
    manager: str | None,
) -> None:
    """Exit 0 if ENTITY has a row matching EXPECTED (attr=value ...).

    With --missing, exit 0 only if no row matches.
    """
    entity_class = app.load_entity(entity)
    fetched = fetch_rows(app, "has", entity_class, where_customizer(where), manager)
    if isinstance(fetched, CommandResult):
        app.emit(fetched)
        return

    try:
        found = app.helpers.array_contains_array(dict(expected), fetched)
    except ResultShapeError as exc:
        app.emit(
            CommandResult(
                ok=False, op="has", error=CommandError(code="RESULT_SHAPE", message=str(exc))
            )
        )
        return
    if contains is not None:
        found = found and contains in serialize_rows(fetched)

    data = {"entity": entity_class.__name__, "found": found, "rows_checked": len(fetched)}
    if found != missing:
        app.emit(CommandResult(ok=True, op="has", data=data))
        return

    wanted = "no matching row" if missing else "a matching row"
    app.emit(
        CommandResult(
            ok=False,
            op="has",
            data=data,
            error=CommandError(
                code="ASSERTION_FAILED",
                message=f"Expected {wanted} in {entity_class.__name__}",
            ),
        )
    )
