"""Command: print one generated artifact to stdout."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mintdctl.commands._base import MintdCommand
from mintdctl.services.deploy import RENDER_KINDS

if TYPE_CHECKING:
    from mintdctl.commands._context import AppContext


@click.command(
    cls=MintdCommand,
    examples=[
        "mintdctl render config",
        "mintdctl render unit > /etc/systemd/system/cdk-mintd.service",
        "mintdctl render env --output /srv/staging",
    ],
)
@click.argument("kind", type=click.Choice(RENDER_KINDS))
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Artifact directory the rendered paths refer to.",
)
@click.pass_obj
def render(app: AppContext, kind: str, output_dir: Path | None) -> None:
    """Render a single artifact (config, env, unit, ...) without writing it."""
    from mintdctl.services.deploy import DeployService

    app.emit_content(DeployService(app.settings, output_dir=output_dir).render(kind))
