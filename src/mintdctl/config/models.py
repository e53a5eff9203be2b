"""Pydantic option models with code-baked defaults.

Sparse TOML contract: defaults baked here, mintdctl.toml only contains
overrides. A minimal deployment needs only ``[service] enable = true``.
"""

from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from mintdctl.domain.defaults import DEFAULT_SETTINGS, deep_merge

DAEMON_NAME = "cdk-mintd"
DEFAULT_LISTEN_PORT = 3338


class LogLevel(StrEnum):
    """Levels accepted by the daemon's ``RUST_LOG`` variable."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


class ServiceOptions(BaseModel):
    """[service] section: how cdk-mintd is installed, configured and supervised."""

    model_config = {"frozen": True}

    enable: bool = False
    package: Path = Path("/usr")
    user: str = DAEMON_NAME
    group: str = DAEMON_NAME
    data_dir: Path = Path("/var/lib") / DAEMON_NAME
    config_file: Path | None = None
    settings: dict[str, Any] = Field(default_factory=dict)
    merge_default_settings: bool = True
    environment: dict[str, str] = Field(default_factory=dict)
    open_firewall: bool = False
    log_level: LogLevel = LogLevel.INFO
    extra_args: list[str] = Field(default_factory=list)
    mnemonic_file: Path | None = None
    restart_sec: int = Field(default=10, ge=0)
    launcher: Path | None = None

    @field_validator("environment", mode="before")
    @classmethod
    def _stringify_environment(cls, value: Any) -> Any:
        """Accept TOML scalars as environment values."""
        if not isinstance(value, dict):
            return value
        out: dict[str, Any] = {}
        for name, raw in value.items():
            if isinstance(raw, bool):
                out[name] = "true" if raw else "false"
            elif isinstance(raw, (int, float)):
                out[name] = str(raw)
            else:
                out[name] = raw
        return out

    @property
    def executable(self) -> Path:
        """Path of the daemon binary inside :attr:`package`."""
        return self.package / "bin" / DAEMON_NAME

    @property
    def launcher_path(self) -> Path:
        """The ``mintdctl`` executable systemd runs as the pre-start hook."""
        if self.launcher is not None:
            return self.launcher
        return Path(sys.executable).with_name("mintdctl")

    def resolved_settings(self) -> dict[str, Any]:
        """Return the settings tree with code defaults merged underneath."""
        if not self.merge_default_settings:
            return deep_merge({}, self.settings)
        return deep_merge(DEFAULT_SETTINGS, self.settings)
