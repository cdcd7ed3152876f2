"""Command: form definition integrity checking."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from formkit.commands._base import FormkitCommand

if TYPE_CHECKING:
    from formkit.commands._context import AppContext


@click.command(
    cls=FormkitCommand,
    examples="""\
  formkit check signup.yaml
  formkit check signup.yaml --errors-only
  formkit check signup.yaml --min-severity error""",
)
@click.argument("definition", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default=None,
    help="Hide issues below this severity (default from [check] config).",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option("--strict", is_flag=True, help="Exit non-zero when any error is found.")
@click.pass_obj
def check(
    app: AppContext,
    definition: Path,
    min_severity: str | None,
    errors_only: bool,
    strict: bool,
) -> None:
    """Check DEFINITION for broken conditions, choices, and field settings."""
    from formkit.services.check import CheckService

    form = app.load_form(definition, "check")
    config = app.settings.check
    svc = CheckService(form, max_condition_depth=config.max_condition_depth)

    threshold = "error" if errors_only else (min_severity or config.min_severity)
    result = svc.check(min_severity=threshold)
    app.emit(result)
    if strict and not result.data.get("healthy", True):
        raise SystemExit(1)
