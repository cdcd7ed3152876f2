"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides definition loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from formkit.output.formatters import OutputSettings, format_result
from formkit.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from formkit.config.settings import FormkitSettings
    from formkit.domain.form import Form
    from formkit.infrastructure.definitions import DefinitionError


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.
    """

    def __init__(self, settings: FormkitSettings) -> None:
        self.settings = settings

        from formkit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def load_form(self, path: Path, op: str) -> Form:
        """Load a form definition, emitting a failed result if it is unusable."""
        from formkit.infrastructure.definitions import DefinitionError, load_form

        try:
            return load_form(path)
        except DefinitionError as exc:
            self.fail_definition(op, exc)

    def fail_definition(self, op: str, exc: DefinitionError) -> NoReturn:
        """Emit a ``DEFINITION_ERROR`` failure for *op* and exit."""
        detail = {"path": str(exc.path)} if exc.path is not None else {}
        error = ServiceError(code="DEFINITION_ERROR", message=exc.message, detail=detail)
        self._emit_failure(ServiceResult(ok=False, op=op, error=error))

    def _output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def _emit_failure(self, result: ServiceResult) -> NoReturn:
        click.echo(format_result(result, settings=self._output_settings()), err=True)
        raise SystemExit(1)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        if not result.ok:
            self._emit_failure(result)
        settings = self._output_settings()
        click.echo(format_result(result, settings=settings))
        # In JSON mode, warnings are already in the serialized payload.
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
