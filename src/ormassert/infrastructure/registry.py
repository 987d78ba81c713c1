"""ManagerRegistry — named entity managers (sessions) for a test run.

Each name maps to a session factory. Sessions are opened lazily on first
:meth:`ManagerRegistry.get_manager` and cached until :meth:`close` or
:meth:`reset_manager`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import MetaData
from sqlalchemy.orm import Session

from ormassert.errors import EntityLoadError, UnknownManagerError
from ormassert.infrastructure.database.engine import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from ormassert.infrastructure.repository import EntityRepository
from ormassert.loading import load_object

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from ormassert.config.models import DatabaseConfig
    from ormassert.config.settings import OrmAssertSettings

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def load_metadata(path: str) -> MetaData:
    """Resolve *path* to a ``MetaData``, accepting a declarative base too."""
    obj = load_object(path)
    metadata = obj if isinstance(obj, MetaData) else getattr(obj, "metadata", None)
    if not isinstance(metadata, MetaData):
        msg = f"{path!r} is neither a MetaData nor a declarative base"
        raise EntityLoadError(msg)
    return metadata


def engine_from_config(config: DatabaseConfig) -> Engine:
    """Engine for one manager config, with its schema created if configured."""
    engine = create_db_engine(config.url, echo=config.echo, foreign_keys=config.foreign_keys)
    if config.metadata and config.create_schema:
        create_schema(engine, load_metadata(config.metadata))
    return engine


class ManagerRegistry:
    """Lookup of entity managers by name.

    Usage::

        registry = ManagerRegistry({"default": sessionmaker(bind=engine)})
        session = registry.get_manager()
        users = registry.get_repository(User).find_all()
    """

    def __init__(
        self,
        factories: Mapping[str, SessionFactory],
        default_manager: str = "default",
    ) -> None:
        if default_manager not in factories:
            raise UnknownManagerError(default_manager, list(factories))
        self._factories = dict(factories)
        self._sessions: dict[str, Session] = {}
        self._engines: list[Engine] = []
        self.default_manager_name = default_manager

    @classmethod
    def from_settings(cls, settings: OrmAssertSettings) -> ManagerRegistry:
        """Build engines and session factories for every configured manager."""
        factories: dict[str, SessionFactory] = {}
        engines: list[Engine] = []
        for name, config in settings.manager_configs().items():
            engine = engine_from_config(config)
            engines.append(engine)
            factories[name] = create_session_factory(engine)
            logger.debug("Registered entity manager %s -> %s", name, engine.url)

        registry = cls(factories, default_manager=settings.default_manager)
        registry._engines = engines
        return registry

    @classmethod
    def from_session(cls, session: Session, name: str = "default") -> ManagerRegistry:
        """Wrap an already-open session as the only manager.

        Resetting this manager hands back the same session.
        """
        registry = cls({name: lambda: session}, default_manager=name)
        registry._sessions[name] = session
        return registry

    def get_manager_names(self) -> list[str]:
        return list(self._factories)

    def get_manager(self, name: str | None = None) -> Session:
        """The session registered under *name* (default manager if None)."""
        name = name or self.default_manager_name
        session = self._sessions.get(name)
        if session is None:
            try:
                factory = self._factories[name]
            except KeyError:
                raise UnknownManagerError(name, self.get_manager_names()) from None
            session = factory()
            self._sessions[name] = session
        return session

    def get_repository(
        self, entity_class: type[Any], manager_name: str | None = None
    ) -> EntityRepository:
        return EntityRepository(self.get_manager(manager_name), entity_class)

    def reset_manager(self, name: str | None = None) -> Session:
        """Close the cached session for *name* and open a fresh one."""
        name = name or self.default_manager_name
        if name not in self._factories:
            raise UnknownManagerError(name, self.get_manager_names())
        stale = self._sessions.pop(name, None)
        if stale is not None:
            stale.close()
        return self.get_manager(name)

    def close(self) -> None:
        """Close every open session and dispose engines this registry built."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        for engine in self._engines:
            engine.dispose()
        self._engines.clear()
