"""Turn ORM result rows into plain dicts."""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.engine import Result, Row
from sqlalchemy.orm import InstanceState


def _instance_state(value: Any) -> InstanceState[Any] | None:
    state = inspect(value, raiseerr=False)
    if isinstance(state, InstanceState):
        return state
    return None


def hydrate_entity(obj: Any) -> dict[str, Any]:
    """Column values of a mapped instance, keyed by attribute name."""
    state = _instance_state(obj)
    if state is None:
        msg = f"{type(obj).__name__} is not a mapped instance"
        raise TypeError(msg)
    return {attr.key: getattr(obj, attr.key) for attr in state.mapper.column_attrs}


def hydrate_row(row: Row[Any], root_key: str) -> dict[str, Any]:
    """Flatten one result row.

    The root entity's columns land at the top level. Other selected
    entities nest under their label, plain columns sit under theirs.
    """
    data: dict[str, Any] = {}
    nested: dict[str, Any] = {}
    for position, (key, value) in enumerate(row._mapping.items()):
        label = key if isinstance(key, str) else str(position)
        if _instance_state(value) is not None:
            hydrated = hydrate_entity(value)
            if label == root_key:
                data.update(hydrated)
            else:
                nested[label] = hydrated
        else:
            nested[label] = value
    data.update(nested)
    return data


def hydrate_result(result: Result[Any], root_key: str) -> list[dict[str, Any]]:
    """Hydrate every row of *result*."""
    return [hydrate_row(row, root_key) for row in result]
