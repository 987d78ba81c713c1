"""Command: show the resolved settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ormassert.output.result import CommandResult

if TYPE_CHECKING:
    from ormassert.commands._context import AppContext


@click.command("config")
@click.pass_obj
def config_cmd(app: AppContext) -> None:
    """Print settings after merging ormassert.toml, env vars, and flags."""
    settings = app.settings
    app.emit(
        CommandResult(
            ok=True,
            op="config",
            data={
                "config_path": str(settings.config_path) if settings.config_path else None,
                "default_manager": settings.default_manager,
                "managers": {
                    name: config.model_dump()
                    for name, config in settings.manager_configs().items()
                },
                "assertions": settings.assertions.model_dump(),
            },
        )
    )
