"""Jinja2 template loading and systemd unit rendering.

Operators may drop a replacement ``cdk-mintd.service.j2`` into
``<artifact_dir>/templates/`` to customise the unit; the packaged template
is the fallback.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from mintdctl.domain.unit import UNIT_NAME

if TYPE_CHECKING:
    from mintdctl.domain.unit import ServiceDescriptor

UNIT_TEMPLATE = f"{UNIT_NAME}.j2"


def systemd_value(value: Any) -> str:
    """Format a Python value the way systemd unit files spell it.

    List items are quoted individually, so ``ReadWritePaths=`` survives a
    path with spaces.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return " ".join(shlex.quote(str(v)) for v in value)
    return str(value)


def build_template_environment(group: str, *, override_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with operator overrides before packaged defaults."""
    loaders: list[BaseLoader] = []
    if override_root is not None:
        template_root = override_root / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("mintdctl", f"templates/{group}"))
    env = Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["systemd_value"] = systemd_value
    return env


def exec_start(launcher: Path, launch_spec: Path) -> str:
    """``ExecStart=`` command running the pre-start hook, which then execs the daemon."""
    return shlex.join([str(launcher), "-v", "launch", "--descriptor", str(launch_spec)])


def render_unit(
    descriptor: ServiceDescriptor,
    *,
    launcher: Path,
    launch_spec: Path,
    override_root: Path | None = None,
) -> str:
    """Render the ``cdk-mintd.service`` unit for *descriptor*."""
    env = build_template_environment("unit", override_root=override_root)
    template = env.get_template(UNIT_TEMPLATE)
    return template.render(d=descriptor, exec_start=exec_start(launcher, launch_spec))
