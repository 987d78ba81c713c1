"""Resolve ``module:attribute`` import paths to objects."""

from __future__ import annotations

import importlib
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import Mapper

from ormassert.errors import EntityLoadError


def load_object(path: str) -> Any:
    """Import ``package.module:attr.sub`` and return the attribute."""
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        msg = f"Invalid import path {path!r}, expected 'module:attribute'"
        raise EntityLoadError(msg)

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import module {module_name!r}: {exc}"
        raise EntityLoadError(msg) from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            msg = f"{module_name!r} has no attribute {attr_path!r}"
            raise EntityLoadError(msg) from exc
    return obj


def load_entity_class(path: str) -> type[Any]:
    """Like :func:`load_object`, but the result must be a mapped class."""
    obj = load_object(path)
    if not isinstance(obj, type) or not isinstance(inspect(obj, raiseerr=False), Mapper):
        msg = f"{path!r} is not a mapped entity class"
        raise EntityLoadError(msg)
    return obj
