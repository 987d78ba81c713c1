"""Query construction for the database assertions.

A customizer is any callable ``(statement, root) -> statement``. It gets
the ``Select`` and the aliased root entity, so filters read naturally::

    def only_admins(stmt, user):
        return stmt.where(user.role == "admin")

Returning ``None`` keeps the statement as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, aliased
from sqlalchemy.orm.util import AliasedClass

from ormassert.hydration import hydrate_result

logger = logging.getLogger(__name__)

DEFAULT_ROOT_ALIAS = "ormassert_root"

QueryCustomizer = Callable[[Select[Any], AliasedClass[Any]], "Select[Any] | None"]


def build_query(
    entity_class: type[Any],
    customizer: QueryCustomizer | None = None,
    *,
    root_alias: str = DEFAULT_ROOT_ALIAS,
) -> tuple[Select[Any], AliasedClass[Any]]:
    """Build ``SELECT root FROM entity AS root``, then apply *customizer*."""
    root = aliased(entity_class, name=root_alias)
    stmt: Select[Any] = select(root)
    if customizer is not None:
        customized = customizer(stmt, root)
        if customized is not None:
            stmt = customized
    return stmt, root


def get_query_results(
    session: Session,
    entity_class: type[Any],
    customizer: QueryCustomizer | None = None,
    *,
    root_alias: str = DEFAULT_ROOT_ALIAS,
) -> list[dict[str, Any]]:
    """Run the entity query and return its rows as plain dicts."""
    stmt, _ = build_query(entity_class, customizer, root_alias=root_alias)
    result = session.execute(stmt)
    # Joined eager loads of collections repeat the parent once per child row.
    compile_state = getattr(getattr(result, "context", None), "compile_state", None)
    if getattr(compile_state, "multi_row_eager_loaders", False):
        result = result.unique()
    rows = hydrate_result(result, root_alias)
    logger.debug("Fetched %d %s row(s)", len(rows), entity_class.__name__)
    return rows
