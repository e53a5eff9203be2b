"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

Holds the resolved settings and owns the stdout/stderr/exit-code policy:
results go to stdout, failures to stderr with exit status 1, warnings to
stderr so redirected artifacts stay clean.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mintdctl.config.logging import configure_logging
from mintdctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mintdctl.config.settings import MintdctlSettings
    from mintdctl.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: MintdctlSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* in the selected output mode; exit 1 on failure."""
        if not result.ok:
            click.echo(format_result(result, settings=self.output), err=True)
            raise SystemExit(1)
        click.echo(format_result(result, settings=self.output))
        self._warn(result)

    def emit_content(self, result: ServiceResult) -> None:
        """Write ``result.data["content"]`` to stdout exactly as rendered.

        Used by ``render``, whose output is redirected into unit and env
        files. JSON and quiet modes, and failures, go through :meth:`emit`.
        """
        if not result.ok or self.output.json_output or self.output.quiet:
            self.emit(result)
            return
        # color=True stops click from stripping escape sequences out of the content
        click.echo(result.data.get("content", ""), nl=False, color=True)
        self._warn(result)

    def _warn(self, result: ServiceResult) -> None:
        # JSON payloads already carry their warnings.
        if self.output.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
