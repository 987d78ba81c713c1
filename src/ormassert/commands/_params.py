"""Click parameter types shared by the commands."""

from __future__ import annotations

import json
from typing import Any

import click


class KeyValue(click.ParamType):
    """``key=value`` pair; the value is read as JSON when it parses.

    ``id=3`` gives ``("id", 3)``, ``active=true`` gives ``("active", True)``,
    ``name=Alice`` stays a string.
    """

    name = "key=value"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> tuple[str, Any]:
        if isinstance(value, tuple):
            return value
        key, sep, raw = str(value).partition("=")
        if not sep or not key:
            self.fail(f"{value!r} is not a key=value pair", param, ctx)
        try:
            parsed: Any = json.loads(raw)
        except ValueError:
            parsed = raw
        return key, parsed


KEY_VALUE = KeyValue()
