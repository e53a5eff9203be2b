"""MintdCommand: click command whose usage examples live behind ``--examples``.

Examples are declared as a sequence of shell lines. ``--help`` only points
at them, so the help text stays short.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click


class MintdCommand(click.Command):
    def __init__(self, *args: Any, examples: Sequence[str] = (), **kwargs: Any) -> None:
        self.examples = tuple(examples)
        if self.examples:
            kwargs.setdefault("epilog", "Run with --examples for usage examples.")
        super().__init__(*args, **kwargs)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in self.examples:
            click.echo(f"  $ {line}")
        ctx.exit(0)
