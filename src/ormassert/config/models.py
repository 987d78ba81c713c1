"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``ormassert.toml`` only holds
overrides. A project usually sets nothing but ``[database] url``.
"""

from __future__ import annotations

from pydantic import BaseModel

from ormassert.query import DEFAULT_ROOT_ALIAS


class DatabaseConfig(BaseModel):
    """[database] section, and each [managers.<name>] section."""

    model_config = {"frozen": True}

    url: str = "sqlite://"
    echo: bool = False
    foreign_keys: bool = True
    metadata: str | None = None  # module:attr of a MetaData or declarative base
    create_schema: bool = True


class AssertionConfig(BaseModel):
    """[assertions] section."""

    model_config = {"frozen": True}

    root_alias: str = DEFAULT_ROOT_ALIAS
    loose_comparison: bool = True
