"""Command: print an entity's rows the way the assertions see them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from ormassert.commands._params import KEY_VALUE
from ormassert.commands._query import fetch_rows, where_customizer
from ormassert.output.result import CommandResult

if TYPE_CHECKING:
    from ormassert.commands._context import AppContext


@click.command()
@click.argument("entity")
@click.option("-w", "--where", multiple=True, type=KEY_VALUE, help="Filter: attr=value.")
@click.option("--order-by", multiple=True, help="Sort attribute, '-' prefix for descending.")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Maximum rows.")
@click.option("--manager", default=None, help="Entity manager name.")
@click.pass_obj
def rows(
    app: AppContext,
    entity: str,
    where: tuple[tuple[str, Any], ...],
    order_by: tuple[str, ...],
    limit: int | None,
    manager: str | None,
) -> None:
    """Show hydrated rows of ENTITY (``package.module:Class``)."""
    entity_class = app.load_entity(entity)
    customizer = where_customizer(where, order_by, limit)
    fetched = fetch_rows(app, "rows", entity_class, customizer, manager)
    if isinstance(fetched, CommandResult):
        app.emit(fetched)
        return
    app.emit(
        CommandResult(
            ok=True,
            op="rows",
            data={"entity": entity_class.__name__, "count": len(fetched), "rows": fetched},
        )
    )
