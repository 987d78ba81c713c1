"""Row comparison and serialization used by the database assertions.

Rows are the plain dicts produced by :mod:`ormassert.hydration`.
"""

from __future__ import annotations

import datetime as _dt
import enum
import json
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from ormassert.errors import ResultShapeError

logger = logging.getLogger(__name__)

_NUMERIC = (int, float, Decimal)


def _comparable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


def values_match(actual: Any, expected: Any, *, loose: bool = True) -> bool:
    """Compare a row value against an expected value.

    Strict mode is plain ``==``. Loose mode also compares enums by value,
    and a numeric string against a number by value, so ``"1.0"`` matches
    ``1`` and ``"2.5"`` matches ``Decimal("2.50")``. A bool only matches
    ``"1"`` or ``"0"``; other strings compare with the number's text.
    """
    if actual == expected:
        return True
    if not loose:
        return False

    actual = _comparable(actual)
    expected = _comparable(expected)
    if actual == expected:
        return True

    if isinstance(actual, str) and isinstance(expected, _NUMERIC):
        return _text_matches_number(actual, expected)
    if isinstance(expected, str) and isinstance(actual, _NUMERIC):
        return _text_matches_number(expected, actual)
    return False


def _text_matches_number(text: str, number: Any) -> bool:
    if isinstance(number, bool):
        return text == ("1" if number else "0")
    try:
        return Decimal(text) == Decimal(str(number))
    except InvalidOperation:
        return text == str(number)


def array_contains_array(
    expected: Mapping[str, Any],
    rows: Iterable[Mapping[str, Any]],
    *,
    loose: bool = True,
) -> bool:
    """Return True if some row holds every key/value pair of *expected*.

    Raises:
        ResultShapeError: A row lacks one of the expected keys.
    """
    for index, row in enumerate(rows):
        for key, value in expected.items():
            if key not in row:
                raise ResultShapeError(key)
            if not values_match(row[key], value, loose=loose):
                break
        else:
            logger.debug("Expected data matched row %d", index)
            return True
    return False


def _json_default(value: Any) -> Any:
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def serialize_rows(rows: Any, *, indent: int | None = None) -> str:
    """Serialize query results to a string for substring assertions.

    Output is JSON without ASCII escaping, so searching for ``"Zoë"`` or
    ``"alice@example.com"`` finds the raw text.
    """
    return json.dumps(rows, default=_json_default, ensure_ascii=False, indent=indent)
