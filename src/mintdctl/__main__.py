"""Allow ``python -m mintdctl``."""

from mintdctl.cli import cli

cli()
