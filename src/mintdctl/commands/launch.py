"""Command: pre-start hook that execs cdk-mintd (used as ExecStart=)."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mintdctl.commands._base import MintdCommand

logger = logging.getLogger(__name__)


@click.command(
    cls=MintdCommand,
    examples=["mintdctl -v launch --descriptor /etc/cdk-mintd/cdk-mintd-launch.json"],
)
@click.option(
    "--descriptor",
    "descriptor_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Launch descriptor written by 'mintdctl deploy'.",
)
def launch(descriptor_path: Path) -> None:
    """Load the mnemonic (if configured) and replace this process with cdk-mintd."""
    from mintdctl.services.launch import StartupPreconditionError, load_descriptor
    from mintdctl.services.launch import launch as exec_daemon

    try:
        descriptor = load_descriptor(descriptor_path)
        exec_daemon(descriptor)
    except StartupPreconditionError as exc:
        logger.error("%s", exc)
        click.echo(f"ERROR: launch: {exc}", err=True)
        raise SystemExit(1) from exc
