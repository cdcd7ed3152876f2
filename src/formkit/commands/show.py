"""Command: list the fields of a form definition in display order."""

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
  formkit show signup.yaml
  formkit show signup.yaml --all
  formkit --json show signup.json""",
)
@click.argument("definition", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--all", "include_archived", is_flag=True, help="Include archived fields.")
@click.pass_obj
def show(app: AppContext, definition: Path, include_archived: bool) -> None:
    """Show the fields of DEFINITION, their types and conditions."""
    from formkit.services.forms import FormService

    form = app.load_form(definition, "describe")
    app.emit(FormService(form).describe(include_archived=include_archived))
