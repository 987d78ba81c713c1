"""Read-side repository over a single entity class."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session


class EntityRepository:
    """Common lookups for one mapped class, bound to a session.

    Criteria are attribute equality filters, as accepted by
    ``Select.filter_by``.
    """

    def __init__(self, session: Session, entity_class: type[Any]) -> None:
        self._session = session
        self.entity_class = entity_class

    def __repr__(self) -> str:
        return f"EntityRepository({self.entity_class.__name__})"

    def find(self, ident: Any) -> Any | None:
        """Fetch by primary key."""
        return self._session.get(self.entity_class, ident)

    def find_all(self) -> list[Any]:
        return self.find_by({})

    def find_by(
        self,
        criteria: Mapping[str, Any],
        *,
        order_by: str | Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Any]:
        """Fetch every entity matching *criteria*.

        ``order_by`` takes attribute names; prefix one with ``-`` for
        descending order.
        """
        stmt = select(self.entity_class).filter_by(**criteria)
        if order_by is not None:
            names = [order_by] if isinstance(order_by, str) else list(order_by)
            stmt = stmt.order_by(*(self._order_clause(name) for name in names))
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return list(self._session.scalars(stmt))

    def find_one_by(self, criteria: Mapping[str, Any]) -> Any | None:
        """First entity matching *criteria*, or None."""
        stmt = select(self.entity_class).filter_by(**criteria).limit(1)
        return self._session.scalars(stmt).first()

    def count(self, criteria: Mapping[str, Any] | None = None) -> int:
        matching = select(self.entity_class).filter_by(**(criteria or {})).subquery()
        stmt = select(func.count()).select_from(matching)
        return int(self._session.execute(stmt).scalar_one())

    def _order_clause(self, name: str) -> Any:
        descending = name.startswith("-")
        column = getattr(self.entity_class, name.lstrip("-"))
        return column.desc() if descending else column.asc()
