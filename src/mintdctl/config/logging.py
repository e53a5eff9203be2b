"""structlog setup shared by the CLI and the systemd launcher.

Log records from both structlog and stdlib loggers go to stderr. Under
systemd (``JOURNAL_STREAM`` is set for units whose stderr is the journal)
timestamps and colours are left out: journald stamps every line itself and
does not interpret ANSI codes. ``--log-json`` switches to one JSON object
per line.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

import structlog

LOGGER_NAME = "mintdctl"


def logging_to_journal(environ: Mapping[str, str] | None = None) -> bool:
    """True when stderr is connected to the systemd journal."""
    return bool((os.environ if environ is None else environ).get("JOURNAL_STREAM"))


def _processors(*, journal: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if not journal:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(structlog.processors.StackInfoRenderer())
    return processors


def _renderer(*, log_json: bool, journal: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=not journal and sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Route mintdctl logs to stderr.

    ``mintdctl.*`` loggers emit DEBUG and up with *verbose*, WARNING and up
    otherwise; third-party loggers stay at WARNING. Calling this again
    replaces the previous handler.
    """
    journal = logging_to_journal(environ)
    shared = _processors(journal=journal)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json=log_json, journal=journal),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
