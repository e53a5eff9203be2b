"""Subcommand modules for mintdctl.

Provides register_commands() which uses deferred imports to keep
``mintdctl --help`` fast and the launcher's import path short.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from mintdctl.commands.deploy import deploy, plan
    from mintdctl.commands.launch import launch
    from mintdctl.commands.render import render
    from mintdctl.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(render)
    cli.add_command(plan)
    cli.add_command(deploy)
    cli.add_command(launch)
