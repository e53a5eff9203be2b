"""ServiceDescriptor: the launch and supervision contract for cdk-mintd.

The descriptor is built once per deployment from :class:`ServiceOptions`
plus the paths of the generated artifacts. systemd consumes it as a unit
file (see :mod:`mintdctl.infrastructure.templates`); the launcher consumes
it as JSON at process start (see :mod:`mintdctl.services.launch`).

Restart policy is unconditional with a fixed delay. Sandboxing denies
filesystem and kernel access by default, with the data directory as the
single writable path.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from mintdctl.config.models import DEFAULT_LISTEN_PORT

if TYPE_CHECKING:
    from mintdctl.config.models import ServiceOptions

UNIT_NAME = "cdk-mintd.service"
DATA_DIR_MODE = 0o750
MNEMONIC_ENV_VAR = "CDK_MINTD_MNEMONIC"
LOG_LEVEL_ENV_VAR = "RUST_LOG"


class ServiceDescriptor(BaseModel):
    """Everything systemd and the launcher need to run one daemon instance."""

    model_config = {"frozen": True}

    description: str = "CDK Mint Daemon"
    after: list[str] = Field(default_factory=lambda: ["network.target"])
    wanted_by: list[str] = Field(default_factory=lambda: ["multi-user.target"])
    type: str = "simple"

    user: str
    group: str
    working_directory: Path
    executable: Path
    config_path: Path
    extra_args: list[str] = Field(default_factory=list)

    restart: str = "always"
    restart_sec: int = 10

    sandbox: dict[str, Any] = Field(default_factory=dict)
    environment: dict[str, str] = Field(default_factory=dict)
    environment_file: Path | None = None
    mnemonic_file: Path | None = None
    allowed_tcp_ports: list[int] = Field(default_factory=list)

    def argv(self) -> list[str]:
        """Daemon command line: fixed flags first, operator extras after."""
        return [
            str(self.executable),
            "--work-dir",
            str(self.working_directory),
            "--config",
            str(self.config_path),
            *self.extra_args,
        ]


def resolve_config_path(options: ServiceOptions, generated: Path) -> Path:
    """The explicit ``config_file`` override if set, else the generated artifact."""
    if options.config_file is not None:
        return options.config_file
    return generated


def sandbox_directives(data_dir: Path) -> dict[str, Any]:
    """Ordered systemd hardening directives for a daemon writing only *data_dir*."""
    return {
        "NoNewPrivileges": True,
        "PrivateTmp": True,
        "ProtectSystem": "strict",
        "ProtectHome": True,
        "ReadWritePaths": [str(data_dir)],
        "ProtectKernelTunables": True,
        "ProtectKernelModules": True,
        "ProtectControlGroups": True,
        "RestrictSUIDSGID": True,
        "RestrictRealtime": True,
        "RestrictNamespaces": True,
        "LockPersonality": True,
        "MemoryDenyWriteExecute": True,
    }


def firewall_ports(options: ServiceOptions) -> list[int]:
    """TCP ports to open on the host; empty unless ``open_firewall`` is set.

    A malformed ``listen_port`` is rejected by the validator before this runs.
    """
    if not options.open_firewall:
        return []
    info = options.resolved_settings().get("info")
    port = info.get("listen_port") if isinstance(info, dict) else None
    if isinstance(port, int) and not isinstance(port, bool):
        return [port]
    return [DEFAULT_LISTEN_PORT]


def build_descriptor(
    options: ServiceOptions,
    *,
    generated_config: Path,
    environment_file: Path | None = None,
) -> ServiceDescriptor:
    """Assemble the descriptor for *options*.

    Args:
        options: The service options.
        generated_config: Path the rendered settings were (or will be) written to.
        environment_file: Path of the rendered env file, or None when the
            environment map is empty.
    """
    return ServiceDescriptor(
        user=options.user,
        group=options.group,
        working_directory=options.data_dir,
        executable=options.executable,
        config_path=resolve_config_path(options, generated_config),
        extra_args=list(options.extra_args),
        restart_sec=options.restart_sec,
        sandbox=sandbox_directives(options.data_dir),
        environment={LOG_LEVEL_ENV_VAR: str(options.log_level)},
        environment_file=environment_file if options.environment else None,
        mnemonic_file=options.mnemonic_file,
        allowed_tcp_ports=firewall_ports(options),
    )


# ---------------------------------------------------------------------------
# Host provisioning snippets
# ---------------------------------------------------------------------------


def tmpfiles_rule(descriptor: ServiceDescriptor) -> str:
    """systemd-tmpfiles line creating the data directory before first start."""
    mode = format(DATA_DIR_MODE, "04o")
    return f"d {descriptor.working_directory} {mode} {descriptor.user} {descriptor.group} -\n"


def sysusers_config(descriptor: ServiceDescriptor) -> str:
    """systemd-sysusers snippet declaring the daemon's system group and user."""
    return (
        f"g {descriptor.group} -\n"
        f'u {descriptor.user} -:{descriptor.group} "CDK Mint Daemon user" '
        f"{descriptor.working_directory}\n"
    )


def render_firewall(ports: list[int]) -> str:
    """nftables snippet accepting inbound TCP on each port; ``""`` when none."""
    if not ports:
        return ""
    lines = [f"add rule inet filter input tcp dport {port} accept" for port in ports]
    return "\n".join(lines) + "\n"
