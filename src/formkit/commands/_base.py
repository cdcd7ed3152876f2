"""Click command class for formkit subcommands.

``show``, ``check`` and ``validate`` each carry a block of invocations
against a sample ``signup.yaml``. ``formkit <command> --examples`` prints
that block and exits before the DEFINITION argument is parsed, so it works
without a definition file at hand.
"""

from __future__ import annotations

from typing import Any

import click


class FormkitCommand(click.Command):
    """Command with an eager ``--examples`` flag when ``examples`` is given."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show example invocations.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)
