"""Pre-start hook and exec of the cdk-mintd daemon.

systemd runs ``mintdctl launch --descriptor <path>`` as ``ExecStart=``.
The hook reads the launch descriptor, loads the mnemonic file if one is
configured, then replaces itself with the daemon via ``execve``. The
precondition check and the exec are separate functions, so either can be
exercised without starting the daemon.

INVARIANT: A configured but missing mnemonic file aborts before the daemon
executable is ever invoked.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import NoReturn

import structlog

from mintdctl.domain.unit import MNEMONIC_ENV_VAR, ServiceDescriptor

log = structlog.get_logger(__name__)

Execve = Callable[[str, list[str], dict[str, str]], object]


class StartupPreconditionError(RuntimeError):
    """The daemon cannot start: a required startup input is unavailable."""


def load_descriptor(path: Path) -> ServiceDescriptor:
    """Read a launch descriptor written by ``mintdctl deploy``."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"Launch descriptor {path} not found"
        raise StartupPreconditionError(msg) from exc
    return ServiceDescriptor.model_validate_json(raw)


def read_mnemonic(path: Path) -> str:
    """Return the mnemonic stored in *path* with trailing newlines stripped."""
    if not path.is_file():
        msg = f"Mnemonic file {path} not found"
        raise StartupPreconditionError(msg)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Mnemonic file {path} could not be read: {exc}"
        raise StartupPreconditionError(msg) from exc
    return content.rstrip("\n")


def prepare_environment(
    descriptor: ServiceDescriptor,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """Build the daemon's environment from the launcher's own.

    Static descriptor variables (``RUST_LOG``) fill gaps only, since systemd
    has already applied ``Environment=`` and ``EnvironmentFile=``. The
    mnemonic, when configured, always wins.

    Raises:
        StartupPreconditionError: if the configured mnemonic file is missing.
    """
    env = dict(environ)
    for name, value in descriptor.environment.items():
        env.setdefault(name, value)

    if descriptor.mnemonic_file is not None:
        env[MNEMONIC_ENV_VAR] = read_mnemonic(descriptor.mnemonic_file)
        log.info("mnemonic_loaded", path=str(descriptor.mnemonic_file))
    return env


def launch(
    descriptor: ServiceDescriptor,
    environ: Mapping[str, str] | None = None,
    *,
    execve: Execve | None = None,
) -> NoReturn:
    """Run the pre-start hook, then exec the daemon in place of this process.

    *execve* defaults to :func:`os.execve`; callers may pass a stand-in to
    observe the final command line.
    """
    env = prepare_environment(descriptor, os.environ if environ is None else environ)
    argv = descriptor.argv()
    log.info("exec_daemon", argv=argv, cwd=str(descriptor.working_directory))
    (execve or os.execve)(argv[0], argv, env)
    msg = f"execve returned without replacing the process: {argv[0]}"
    raise StartupPreconditionError(msg)
