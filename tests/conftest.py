"""Shared pytest fixtures and test helpers for ormassert tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ormassert.helpers import DatabaseHelpers
from ormassert.infrastructure.database.engine import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from ormassert.infrastructure.registry import ManagerRegistry
from tests.models import Base, Role, User


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine() -> Generator[Engine]:
    """In-memory SQLite engine with the test schema created."""
    engine = create_db_engine("sqlite://")
    create_schema(engine, Base.metadata)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def registry(db_engine: Engine) -> Generator[ManagerRegistry]:
    """Registry with a single default manager on the test engine."""
    reg = ManagerRegistry({"default": create_session_factory(db_engine)})
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture
def session(registry: ManagerRegistry) -> Session:
    return registry.get_manager()


@pytest.fixture
def db(registry: ManagerRegistry) -> DatabaseHelpers:
    """Database helpers over the test registry."""
    return DatabaseHelpers(registry)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def add_user(session: Session, email: str, **kwargs: Any) -> User:
    """Add and flush a user."""
    user = User(email=email, **kwargs)
    session.add(user)
    session.flush()
    return user


@pytest.fixture
def app_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """File-backed database with three users, configured via ormassert.toml.

    Changes CWD to the temp directory so the CLI discovers the config.
    Returns the database URL.
    """
    monkeypatch.delenv("ORMASSERT_CONFIG", raising=False)
    url = f"sqlite:///{tmp_path / 'app.db'}"
    engine = create_db_engine(url)
    create_schema(engine, Base.metadata)
    with Session(engine) as session:
        session.add_all(
            [
                User(email="alice@example.com", name="Alice", age=31, role=Role.ADMIN),
                User(email="bob@example.com", name="Bob", age=27),
                User(email="carol@example.com", name="Carol", age=45),
            ]
        )
        session.commit()
    engine.dispose()

    (tmp_path / "ormassert.toml").write_text(
        f'[database]\nurl = "{url}"\nmetadata = "tests.models:Base"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    return url
