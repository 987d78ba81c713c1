"""pytest plugin exposing the database helpers as fixtures.

Loaded automatically through the ``pytest11`` entry point. Every test gets
a session joined to an outer transaction that is rolled back afterwards,
so rows created by one test never leak into the next. Commits inside the
code under test only release SAVEPOINTs.

Point it at an application with ``ormassert.toml``::

    [database]
    url = "postgresql+psycopg://localhost/app_test"
    metadata = "app.models:Base"

or override ``ormassert_engine`` / ``ormassert_registry`` in ``conftest.py``.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.orm import Session

from ormassert.config.settings import OrmAssertSettings
from ormassert.helpers import DatabaseHelpers
from ormassert.infrastructure.registry import ManagerRegistry, engine_from_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("ormassert", "database assertion helpers")
    group.addoption(
        "--ormassert-url",
        default=None,
        help="Database URL for the default entity manager.",
    )
    group.addoption(
        "--ormassert-config",
        default=None,
        help="Path to an ormassert.toml file.",
    )


@pytest.fixture(scope="session")
def ormassert_settings(pytestconfig: pytest.Config) -> OrmAssertSettings:
    """Settings from ormassert.toml, env vars, and command-line options."""
    return OrmAssertSettings.load(
        config_path=pytestconfig.getoption("ormassert_config"),
        start=pytestconfig.rootpath,
        url=pytestconfig.getoption("ormassert_url"),
    )


@pytest.fixture(scope="session")
def ormassert_engine(ormassert_settings: OrmAssertSettings) -> Generator[Engine]:
    """Engine of the default entity manager, schema created once per run."""
    engine = engine_from_config(ormassert_settings.database)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def ormassert_session(ormassert_engine: Engine) -> Generator[Session]:
    """Session inside a transaction that is rolled back after the test."""
    with ormassert_engine.connect() as conn:
        outer = conn.begin()
        session = Session(bind=conn, join_transaction_mode="create_savepoint")
        try:
            yield session
        finally:
            session.close()
            if outer.is_active:
                outer.rollback()


@pytest.fixture
def ormassert_registry(
    ormassert_session: Session, ormassert_settings: OrmAssertSettings
) -> ManagerRegistry:
    """Registry whose default manager is the rolled-back test session."""
    return ManagerRegistry.from_session(
        ormassert_session, name=ormassert_settings.default_manager
    )


@pytest.fixture
def db(
    ormassert_registry: ManagerRegistry, ormassert_settings: OrmAssertSettings
) -> DatabaseHelpers:
    """Database helpers for the current test."""
    return DatabaseHelpers.from_settings(ormassert_settings, registry=ormassert_registry)
