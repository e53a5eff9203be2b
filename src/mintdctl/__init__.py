"""mintdctl: deploy and supervise the cdk-mintd Cashu mint daemon under systemd."""

__version__ = "0.1.0"
