"""Exception hierarchy for ormassert.

Assertion failures are plain :class:`AssertionError`. Everything here is a
hard failure: the helper could not even evaluate the assertion.
"""

from __future__ import annotations


class OrmAssertError(Exception):
    """Base class for all ormassert errors."""


class ResultShapeError(OrmAssertError):
    """An expected key is missing from the queried rows.

    Every row of a query result has the same keys, so once one row lacks
    the key no row can match. Deliberately not an ``AssertionError``.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"Expected data does not match with database results: "
            f"key `{key}` was not found in results"
        )


class UnknownManagerError(OrmAssertError, KeyError):
    """No entity manager is registered under the requested name."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"Unknown entity manager {name!r} (known: {', '.join(known) or 'none'})")

    def __str__(self) -> str:
        return str(self.args[0])


class EntityLoadError(OrmAssertError):
    """An import path could not be resolved to a mapped entity class."""
