"""``formkit`` entry point.

The group resolves :class:`FormkitSettings` from the global flags, the
``FORMKIT_*`` environment and ``formkit.toml``, then hands an
:class:`AppContext` to ``show``, ``check`` and ``validate``. Output mode
flags (``--json``, ``-q``) pick the result renderer. ``-v`` adds the choices
column to ``show`` and error detail, and lowers the log level to DEBUG;
``--log-json`` only affects the log stream on stderr.
"""

from __future__ import annotations

import click

from formkit import __version__
from formkit.commands import register_commands
from formkit.commands._context import AppContext
from formkit.config.settings import FormkitSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="formkit")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Show choices, error detail and debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """formkit: inspect and validate form definitions."""
    ctx.ensure_object(dict)
    settings = FormkitSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
