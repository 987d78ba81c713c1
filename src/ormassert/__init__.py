"""ormassert — database assertion helpers for SQLAlchemy integration tests."""

from ormassert.errors import EntityLoadError, OrmAssertError, ResultShapeError, UnknownManagerError
from ormassert.helpers import DatabaseHelpers, WithDatabase
from ormassert.infrastructure.registry import ManagerRegistry
from ormassert.infrastructure.repository import EntityRepository
from ormassert.matching import array_contains_array, serialize_rows

__version__ = "0.3.0"

__all__ = [
    "DatabaseHelpers",
    "EntityLoadError",
    "EntityRepository",
    "ManagerRegistry",
    "OrmAssertError",
    "ResultShapeError",
    "UnknownManagerError",
    "WithDatabase",
    "__version__",
    "array_contains_array",
    "serialize_rows",
]
