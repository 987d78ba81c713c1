"""Config file discovery and loading.

``ormassert.toml`` is found by walking up from the working directory,
the way git finds ``.git/``. ``ORMASSERT_CONFIG`` pins an explicit file.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "ormassert.toml"
CONFIG_ENV_VAR = "ORMASSERT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ormassert.toml at or above *start*, or None.

    When ORMASSERT_CONFIG is set it wins, even if it points nowhere.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path*; missing or absent files read as empty config."""
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
