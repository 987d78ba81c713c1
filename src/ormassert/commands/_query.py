"""Shared query plumbing for the row-reading commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import click
from sqlalchemy.exc import SQLAlchemyError

from ormassert.errors import OrmAssertError
from ormassert.output.result import CommandError, CommandResult
from ormassert.query import QueryCustomizer, get_query_results

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm.util import AliasedClass

    from ormassert.commands._context import AppContext


def where_customizer(
    where: Sequence[tuple[str, Any]],
    order_by: Sequence[str] = (),
    limit: int | None = None,
) -> QueryCustomizer:
    """Customizer applying equality filters, ordering, and a row limit."""

    def customize(stmt: Select[Any], root: AliasedClass[Any]) -> Select[Any]:
        if where:
            stmt = stmt.filter_by(**dict(where))
        for name in order_by:
            descending = name.startswith("-")
            try:
                column = getattr(root, name.lstrip("-"))
            except AttributeError as exc:
                msg = f"Unknown attribute {name.lstrip('-')!r}"
                raise click.BadParameter(msg, param_hint="--order-by") from exc
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    return customize


def fetch_rows(
    app: AppContext,
    op: str,
    entity_class: type[Any],
    customizer: QueryCustomizer,
    manager: str | None,
) -> list[dict[str, Any]] | CommandResult:
    """Query rows, or a failed CommandResult when the database refuses."""
    helpers = app.helpers
    try:
        session = helpers.get_registry().get_manager(manager)
        return get_query_results(
            session, entity_class, customizer, root_alias=helpers.root_alias
        )
    except (OrmAssertError, SQLAlchemyError) as exc:
        return CommandResult(
            ok=False,
            op=op,
            error=CommandError(code="QUERY_FAILED", message=str(exc).splitlines()[0]),
        )
