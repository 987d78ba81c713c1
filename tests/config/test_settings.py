"""Tests for OrmAssertSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from ormassert.config.discovery import CONFIG_ENV_VAR
from ormassert.config.models import DatabaseConfig
from ormassert.config.settings import OrmAssertSettings
from ormassert.query import DEFAULT_ROOT_ALIAS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("ORMASSERT_DATABASE__URL", raising=False)
    monkeypatch.delenv("ORMASSERT_VERBOSE", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = OrmAssertSettings.load(start=tmp_path)
        assert settings.config_path is None
        assert settings.database.url == "sqlite://"
        assert settings.database.foreign_keys is True
        assert settings.database.metadata is None
        assert settings.managers == {}
        assert settings.default_manager == "default"
        assert settings.assertions.root_alias == DEFAULT_ROOT_ALIAS
        assert settings.assertions.loose_comparison is True
        assert settings.verbose is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = OrmAssertSettings.load(start=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "ormassert.toml").write_text(
            '[database]\nurl = "sqlite:///app.db"\nmetadata = "app.models:Base"\n'
            "[assertions]\nloose_comparison = false\n"
        )
        settings = OrmAssertSettings.load(start=tmp_path)
        assert settings.config_path == tmp_path / "ormassert.toml"
        assert settings.database.url == "sqlite:///app.db"
        assert settings.database.metadata == "app.models:Base"
        assert settings.database.echo is False  # default preserved
        assert settings.assertions.loose_comparison is False

    def test_named_managers(self, tmp_path: Path) -> None:
        (tmp_path / "ormassert.toml").write_text(
            '[managers.audit]\nurl = "sqlite:///audit.db"\n'
        )
        settings = OrmAssertSettings.load(start=tmp_path)
        assert settings.managers["audit"].url == "sqlite:///audit.db"
        assert list(settings.manager_configs()) == ["default", "audit"]

    def test_database_wins_name_clash(self) -> None:
        settings = OrmAssertSettings(
            database=DatabaseConfig(url="sqlite:///main.db"),
            managers={"default": DatabaseConfig(url="sqlite:///other.db")},
        )
        assert settings.manager_configs()["default"].url == "sqlite:///main.db"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[database]\nurl = "sqlite:///custom.db"\n')
        settings = OrmAssertSettings.load(config_path=custom, start=tmp_path)
        assert settings.database.url == "sqlite:///custom.db"
        assert settings.config_path == custom

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path) -> None:
        settings = OrmAssertSettings.load(config_path=tmp_path / "nope.toml")
        assert settings.config_path is None
        assert settings.database.url == "sqlite://"


class TestOverrides:
    def test_env_var_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "ormassert.toml").write_text('[database]\nurl = "sqlite:///toml.db"\n')
        monkeypatch.setenv("ORMASSERT_DATABASE__URL", "sqlite:///env.db")
        settings = OrmAssertSettings.load(start=tmp_path)
        assert settings.database.url == "sqlite:///env.db"

    def test_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ORMASSERT_VERBOSE", "true")
        settings = OrmAssertSettings.load(start=tmp_path, verbose=False)
        assert settings.verbose is False

    def test_url_override_keeps_other_database_fields(self, tmp_path: Path) -> None:
        (tmp_path / "ormassert.toml").write_text(
            '[database]\nurl = "sqlite:///toml.db"\nmetadata = "app.models:Base"\n'
        )
        settings = OrmAssertSettings.load(start=tmp_path, url="sqlite:///cli.db")
        assert settings.database.url == "sqlite:///cli.db"
        assert settings.database.metadata == "app.models:Base"
