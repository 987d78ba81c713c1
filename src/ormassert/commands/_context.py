"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. The registry is built lazily so ``--help`` and
``--version`` never open a database connection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from ormassert.errors import OrmAssertError
from ormassert.output.formatters import format_result

if TYPE_CHECKING:
    from ormassert.config.settings import OrmAssertSettings
    from ormassert.helpers import DatabaseHelpers
    from ormassert.output.result import CommandResult


class AppContext:
    """Settings plus lazily created database helpers."""

    def __init__(self, settings: OrmAssertSettings) -> None:
        self.settings = settings
        self._helpers: DatabaseHelpers | None = None

        from ormassert.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def helpers(self) -> DatabaseHelpers:
        """Database helpers over the configured managers (created on first use)."""
        if self._helpers is None:
            from ormassert.helpers import DatabaseHelpers

            try:
                self._helpers = DatabaseHelpers.from_settings(self.settings)
            except OrmAssertError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._helpers

    def load_entity(self, path: str) -> type[Any]:
        """Resolve an entity import path, reporting failures as usage errors."""
        from ormassert.loading import load_entity_class

        try:
            return load_entity_class(path)
        except OrmAssertError as exc:
            raise click.BadParameter(str(exc), param_hint="ENTITY") from exc

    def emit(self, result: CommandResult) -> None:
        """Print *result*; a failed result exits with code 1 via stderr."""
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._helpers is not None:
            self._helpers.get_registry().close()
            self._helpers = None
