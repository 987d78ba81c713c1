"""Tests for ManagerRegistry."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ormassert.config.models import DatabaseConfig
from ormassert.config.settings import OrmAssertSettings
from ormassert.errors import EntityLoadError, UnknownManagerError
from ormassert.infrastructure.database.engine import create_session_factory
from ormassert.infrastructure.registry import (
    ManagerRegistry,
    engine_from_config,
    load_metadata,
)
from ormassert.infrastructure.repository import EntityRepository
from tests.models import Base, User


class TestManagers:
    def test_default_manager(self, registry: ManagerRegistry) -> None:
        assert registry.default_manager_name == "default"
        assert isinstance(registry.get_manager(), Session)

    def test_manager_is_cached(self, registry: ManagerRegistry) -> None:
        assert registry.get_manager() is registry.get_manager("default")

    def test_unknown_manager(self, registry: ManagerRegistry) -> None:
        with pytest.raises(UnknownManagerError, match="replica") as excinfo:
            registry.get_manager("replica")
        assert isinstance(excinfo.value, KeyError)
        assert excinfo.value.known == ["default"]

    def test_unknown_default_rejected(self, db_engine: Engine) -> None:
        with pytest.raises(UnknownManagerError):
            ManagerRegistry({"main": create_session_factory(db_engine)}, default_manager="other")

    def test_named_managers(self, db_engine: Engine) -> None:
        factory = create_session_factory(db_engine)
        reg = ManagerRegistry({"default": factory, "audit": factory})
        assert reg.get_manager_names() == ["default", "audit"]
        assert reg.get_manager("audit") is not reg.get_manager()
        reg.close()

    def test_reset_manager(self, registry: ManagerRegistry) -> None:
        first = registry.get_manager()
        second = registry.reset_manager()
        assert second is not first
        assert registry.get_manager() is second

    def test_reset_unknown_manager(self, registry: ManagerRegistry) -> None:
        with pytest.raises(UnknownManagerError):
            registry.reset_manager("nope")

    def test_get_repository(self, registry: ManagerRegistry) -> None:
        repo = registry.get_repository(User)
        assert isinstance(repo, EntityRepository)
        assert repo.entity_class is User


class TestFromSession:
    def test_wraps_session(self, db_engine: Engine) -> None:
        session = Session(db_engine)
        reg = ManagerRegistry.from_session(session, name="app")
        assert reg.default_manager_name == "app"
        assert reg.get_manager() is session
        assert reg.reset_manager() is session
        session.close()


class TestFromSettings:
    def test_builds_default_and_named_managers(self, tmp_path: Path) -> None:
        settings = OrmAssertSettings(
            database=DatabaseConfig(metadata="tests.models:Base"),
            managers={"archive": DatabaseConfig(url=f"sqlite:///{tmp_path / 'archive.db'}")},
        )
        reg = ManagerRegistry.from_settings(settings)
        try:
            assert reg.get_manager_names() == ["default", "archive"]
            session = reg.get_manager()
            session.add(User(email="a@example.com"))
            session.flush()
            assert reg.get_repository(User).count() == 1
            assert str(reg.get_manager("archive").get_bind().url).endswith("archive.db")
        finally:
            reg.close()

    def test_custom_default_name(self) -> None:
        reg = ManagerRegistry.from_settings(OrmAssertSettings(default_manager="main"))
        assert reg.get_manager_names() == ["main"]
        reg.close()


class TestLoadMetadata:
    def test_from_declarative_base(self) -> None:
        assert load_metadata("tests.models:Base") is Base.metadata

    def test_from_metadata_object(self) -> None:
        assert load_metadata("tests.models:Base.metadata") is Base.metadata

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(EntityLoadError, match="neither a MetaData"):
            load_metadata("tests.models:Role")

    def test_engine_from_config_creates_schema(self) -> None:
        engine = engine_from_config(DatabaseConfig(metadata="tests.models:Base"))
        with Session(engine) as session:
            assert session.query(User).count() == 0

    def test_engine_from_config_skips_schema(self) -> None:
        engine = engine_from_config(
            DatabaseConfig(metadata="tests.models:Base", create_schema=False)
        )
        assert inspect(engine).get_table_names() == []
