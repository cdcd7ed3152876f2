"""Command: validate a response file against a form definition."""

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
  formkit validate signup.yaml response.yaml
  formkit validate signup.yaml response.json --visible-only
  formkit --json validate signup.yaml response.yaml""",
)
@click.argument("definition", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("response", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--visible-only",
    is_flag=True,
    help="Only report which fields are shown for the response.",
)
@click.pass_obj
def validate(app: AppContext, definition: Path, response: Path, visible_only: bool) -> None:
    """Validate the values in RESPONSE against DEFINITION."""
    from formkit.infrastructure.definitions import DefinitionError, load_response
    from formkit.services.responses import ResponseService

    op = "visible_fields" if visible_only else "validate_response"
    form = app.load_form(definition, op)
    try:
        values = load_response(response, form)
    except DefinitionError as exc:
        app.fail_definition(op, exc)

    policy = app.settings.responses
    svc = ResponseService(
        form,
        hidden_values=policy.hidden_values,
        unknown_keys=policy.unknown_keys,
    )
    app.emit(svc.visible_fields(values) if visible_only else svc.validate(values))
