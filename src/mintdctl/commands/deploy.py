"""Commands: preview and write the cdk-mintd deployment artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mintdctl.commands._base import MintdCommand

if TYPE_CHECKING:
    from mintdctl.commands._context import AppContext

_output_option = click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write artifacts here instead of the configured artifact_dir.",
)


@click.command(
    cls=MintdCommand,
    examples=["mintdctl plan", "mintdctl --json plan --output ./build"],
)
@_output_option
@click.pass_obj
def plan(app: AppContext, output_dir: Path | None) -> None:
    """Validate and list the artifacts a deploy would write."""
    from mintdctl.services.deploy import DeployService

    app.emit(DeployService(app.settings, output_dir=output_dir).plan())


@click.command(
    cls=MintdCommand,
    examples=[
        "mintdctl deploy",
        "mintdctl deploy --output /etc/cdk-mintd --create-data-dir",
        "MINTDCTL_SERVICE__LOG_LEVEL=debug mintdctl deploy",
    ],
)
@_output_option
@click.option(
    "--create-data-dir",
    is_flag=True,
    help="Create the data directory now (mode 0750, owned by the service user).",
)
@click.pass_obj
def deploy(app: AppContext, output_dir: Path | None, create_data_dir: bool) -> None:
    """Validate, render, and write every artifact."""
    from mintdctl.services.deploy import DeployService

    svc = DeployService(app.settings, output_dir=output_dir)
    app.emit(svc.deploy(create_data_dir=create_data_dir))
