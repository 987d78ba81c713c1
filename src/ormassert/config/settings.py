"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  (CLI flags, pytest options)
  2. Env vars     (``ORMASSERT_*`` prefix, ``__`` for nesting)
  3. TOML file    (``ormassert.toml`` discovered via walk-up)
  4. Code defaults baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ormassert.config.discovery import find_config, load_toml
from ormassert.config.models import AssertionConfig, DatabaseConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``ormassert.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = load_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class OrmAssertSettings(BaseSettings):
    """Resolved configuration for the helpers, pytest plugin, and CLI.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        database: Connection for the default entity manager.
        managers: Additional named entity managers.
        default_manager: Name under which ``database`` is registered.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ORMASSERT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    managers: dict[str, DatabaseConfig] = Field(default_factory=dict)
    default_manager: str = "default"
    assertions: AssertionConfig = Field(default_factory=AssertionConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        url: str | None = None,
        **overrides: Any,
    ) -> OrmAssertSettings:
        """Discover the TOML file and build settings.

        *url*, when given, replaces the default manager's database URL
        while keeping the rest of its ``[database]`` section.
        """
        toml_path: Path | None
        if config_path:
            p = Path(config_path)
            toml_path = p if p.is_file() else None
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            settings = cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

        if url:
            database = settings.database.model_copy(update={"url": url})
            settings = settings.model_copy(update={"database": database})
        return settings

    def manager_configs(self) -> dict[str, DatabaseConfig]:
        """Every manager's config, default first. ``[database]`` wins a name clash."""
        configs = {self.default_manager: self.database}
        for name, config in self.managers.items():
            configs.setdefault(name, config)
        return configs
