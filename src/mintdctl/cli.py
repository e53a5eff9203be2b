"""Root CLI group for mintdctl with global flags and command registration."""

from __future__ import annotations

import click

from mintdctl import __version__
from mintdctl.commands import register_commands
from mintdctl.commands._context import AppContext
from mintdctl.config.settings import MintdctlSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mintdctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """mintdctl: deploy and supervise the cdk-mintd Cashu mint daemon."""
    ctx.ensure_object(dict)
    # Only pass flags that were set, so MINTDCTL_* env vars and TOML still apply.
    flags = {
        name: value
        for name, value in (
            ("json_output", json_output),
            ("quiet", quiet),
            ("verbose", verbose),
            ("log_json", log_json),
        )
        if value
    }
    settings = MintdctlSettings.from_cli(config_path=config_path, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
