"""Engine and session factory setup via SQLAlchemy."""

from ormassert.infrastructure.database.engine import (
    create_db_engine,
    create_schema,
    create_session_factory,
)

__all__ = [
    "create_db_engine",
    "create_schema",
    "create_session_factory",
]
