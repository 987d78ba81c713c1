"""Subcommand modules for the ormassert CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root CLI group."""
    from ormassert.commands.config_cmd import config_cmd
    from ormassert.commands.has import has
    from ormassert.commands.rows import rows

    cli.add_command(rows)
    cli.add_command(has)
    cli.add_command(config_cmd)
