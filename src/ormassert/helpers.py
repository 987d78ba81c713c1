"""Database helpers for integration tests.

:class:`DatabaseHelpers` persists fixture rows and asserts on what the
database holds. Expected data is either a mapping, matched against each
hydrated row, or a string, searched for in the serialized results::

    db.create_many(User, 3, lambda user, i: setattr(user, "email", f"u{i}@example.com"))
    db.assert_database_has({"email": "u1@example.com"}, User)
    db.assert_database_not_has("u9@example.com", User)

:class:`WithDatabase` exposes the same methods on a test class that
provides ``get_registry()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Self, TypeVar

from ormassert.infrastructure.registry import ManagerRegistry
from ormassert.matching import array_contains_array, serialize_rows
from ormassert.query import DEFAULT_ROOT_ALIAS, QueryCustomizer, get_query_results

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from ormassert.config.settings import OrmAssertSettings
    from ormassert.infrastructure.repository import EntityRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

Constructor = Callable[[Any, Any], Any]
Expected = Mapping[str, Any] | str


class DatabaseHelpers:
    """Create and assert helpers bound to one :class:`ManagerRegistry`.

    Args:
        registry: Source of entity managers.
        root_alias: Alias of the queried entity inside assertion queries.
        loose: Loose value comparison (``"1"`` matches ``1``).
    """

    def __init__(
        self,
        registry: ManagerRegistry,
        *,
        root_alias: str = DEFAULT_ROOT_ALIAS,
        loose: bool = True,
    ) -> None:
        self._registry = registry
        self.root_alias = root_alias
        self.loose = loose

    @classmethod
    def from_settings(
        cls, settings: OrmAssertSettings, registry: ManagerRegistry | None = None
    ) -> DatabaseHelpers:
        """Helpers configured from ``[assertions]``, over *registry* or a new one."""
        if registry is None:
            registry = ManagerRegistry.from_settings(settings)
        return cls(
            registry,
            root_alias=settings.assertions.root_alias,
            loose=settings.assertions.loose_comparison,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_registry(self) -> ManagerRegistry:
        return self._registry

    def get_manager(self) -> Session:
        """The registry's current default entity manager.

        The registry caches the session, so repeated calls return the same
        one until :meth:`ManagerRegistry.reset_manager` replaces it.
        """
        return self._registry.get_manager()

    def get_repository(self, entity_class: type[T]) -> EntityRepository:
        return self._registry.get_repository(entity_class)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_one(
        self,
        entity: type[T] | T,
        constructor: Constructor | None = None,
        metadata: Any = None,
        and_flush: bool = True,
    ) -> T:
        """Persist one entity and return it.

        Args:
            entity: An entity class (instantiated without arguments) or an
                instance.
            constructor: Called as ``constructor(entity, metadata)`` to fill
                in the entity before it is added.
            metadata: Passed through to *constructor*.
            and_flush: Flush the session so the row is in the database.
        """
        instance: Any = entity() if isinstance(entity, type) else entity

        if constructor is not None:
            constructor(instance, metadata)

        manager = self.get_manager()
        manager.add(instance)
        if and_flush:
            manager.flush()
        return instance

    def create_many(
        self,
        entity_class: type[T],
        number_to_create: int,
        constructor: Constructor | None = None,
    ) -> list[T]:
        """Persist *number_to_create* entities, flushing once at the end.

        The constructor receives each entity with its 0-based index.
        """
        entities = [
            self.create_one(entity_class, constructor, index, and_flush=False)
            for index in range(number_to_create)
        ]
        self.get_manager().flush()
        logger.debug("Created %d %s row(s)", len(entities), entity_class.__name__)
        return entities

    # ------------------------------------------------------------------
    # Queries and assertions
    # ------------------------------------------------------------------

    def get_query_results(
        self,
        entity_class: type[Any],
        customizer: QueryCustomizer | None = None,
    ) -> list[dict[str, Any]]:
        """Rows of *entity_class* as plain dicts.

        *customizer* receives ``(statement, root)`` and returns the
        statement to run.
        """
        return get_query_results(
            self.get_manager(), entity_class, customizer, root_alias=self.root_alias
        )

    def array_contains_array(
        self, expected: Mapping[str, Any], rows: Iterable[Mapping[str, Any]]
    ) -> bool:
        return array_contains_array(expected, rows, loose=self.loose)

    def assert_database_has(
        self,
        expected: Expected,
        entity_class: type[Any],
        customizer: QueryCustomizer | None = None,
    ) -> Self:
        """Assert that some *entity_class* row matches *expected*.

        Raises:
            AssertionError: No row matches.
            ResultShapeError: An expected key is not a field of the rows.
        """
        rows = self.get_query_results(entity_class, customizer)
        if isinstance(expected, Mapping):
            if not self.array_contains_array(expected, rows):
                msg = f"Failed to assert that data was found in database: {dict(expected)!r}"
                raise AssertionError(msg)
        elif isinstance(expected, str):
            if expected not in serialize_rows(rows):
                msg = f"Failed to assert that {expected!r} was found in database"
                raise AssertionError(msg)
        else:
            raise _unsupported(expected)
        return self

    def assert_database_not_has(
        self,
        expected: Expected,
        entity_class: type[Any],
        customizer: QueryCustomizer | None = None,
    ) -> Self:
        """Assert that no *entity_class* row matches *expected*.

        Raises:
            AssertionError: A row matches.
            ResultShapeError: An expected key is not a field of the rows.
        """
        rows = self.get_query_results(entity_class, customizer)
        if isinstance(expected, Mapping):
            if self.array_contains_array(expected, rows):
                msg = f"Failed to assert that data was not found in database: {dict(expected)!r}"
                raise AssertionError(msg)
        elif isinstance(expected, str):
            if expected in serialize_rows(rows):
                msg = f"Failed to assert that {expected!r} was not found in database"
                raise AssertionError(msg)
        else:
            raise _unsupported(expected)
        return self


def _unsupported(expected: Any) -> TypeError:
    msg = f"Expected data must be a mapping or a string, got {type(expected).__name__}"
    return TypeError(msg)


class WithDatabase:
    """Mixin exposing :class:`DatabaseHelpers` methods on a test class.

    The class supplies the registry::

        class TestSignup(WithDatabase):
            def get_registry(self):
                return registry

            def test_creates_user(self):
                signup("alice@example.com")
                self.assert_database_has({"email": "alice@example.com"}, User)
    """

    _database_helpers: DatabaseHelpers | None = None

    def get_registry(self) -> ManagerRegistry:
        raise NotImplementedError("Test classes using WithDatabase must define get_registry()")

    @property
    def database_helpers(self) -> DatabaseHelpers:
        if self._database_helpers is None:
            self._database_helpers = DatabaseHelpers(self.get_registry())
        return self._database_helpers

    def get_manager(self) -> Session:
        return self.database_helpers.get_manager()

    def get_repository(self, entity_class: type[Any]) -> EntityRepository:
        return self.database_helpers.get_repository(entity_class)

    def create_one(
        self,
        entity: Any,
        constructor: Constructor | None = None,
        metadata: Any = None,
        and_flush: bool = True,
    ) -> Any:
        return self.database_helpers.create_one(entity, constructor, metadata, and_flush)

    def create_many(
        self, entity_class: type[T], number_to_create: int, constructor: Constructor | None = None
    ) -> list[T]:
        return self.database_helpers.create_many(entity_class, number_to_create, constructor)

    def get_query_results(
        self, entity_class: type[Any], customizer: QueryCustomizer | None = None
    ) -> list[dict[str, Any]]:
        return self.database_helpers.get_query_results(entity_class, customizer)

    def array_contains_array(
        self, expected: Mapping[str, Any], rows: Iterable[Mapping[str, Any]]
    ) -> bool:
        return self.database_helpers.array_contains_array(expected, rows)

    def assert_database_has(
        self,
        expected: Expected,
        entity_class: type[Any],
        customizer: QueryCustomizer | None = None,
    ) -> Self:
        self.database_helpers.assert_database_has(expected, entity_class, customizer)
        return self

    def assert_database_not_has(
        self,
        expected: Expected,
        entity_class: type[Any],
        customizer: QueryCustomizer | None = None,
    ) -> Self:
        self.database_helpers.assert_database_not_has(expected, entity_class, customizer)
        return self
