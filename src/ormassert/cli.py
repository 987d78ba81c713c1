"""Root CLI group for ormassert with global flags and command registration."""

from __future__ import annotations

import click

from ormassert import __version__
from ormassert.commands import register_commands
from ormassert.commands._context import AppContext
from ormassert.config.settings import OrmAssertSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ormassert")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--url", default=None, help="Override the default database URL.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    url: str | None,
) -> None:
    """ormassert — inspect and assert database rows through SQLAlchemy."""
    settings = OrmAssertSettings.load(
        config_path=config_path,
        url=url,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
