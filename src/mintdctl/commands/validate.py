"""Command: check required settings before anything is deployed."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mintdctl.commands._base import MintdCommand

if TYPE_CHECKING:
    from mintdctl.commands._context import AppContext


@click.command(
    cls=MintdCommand,
    examples=[
        "mintdctl validate",
        "mintdctl --json validate",
        "mintdctl -c /etc/mintdctl/mintdctl.toml validate",
    ],
)
@click.pass_obj
def validate(app: AppContext) -> None:
    """Report every missing required setting in one pass."""
    from mintdctl.services.deploy import DeployService

    app.emit(DeployService(app.settings).validate())
