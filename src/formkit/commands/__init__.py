"""Subcommand modules for formkit.

Provides register_commands() which uses deferred imports to keep
``formkit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from formkit.commands.check import check
    from formkit.commands.show import show
    from formkit.commands.validate import validate

    cli.add_command(show)
    cli.add_command(check)
    cli.add_command(validate)
