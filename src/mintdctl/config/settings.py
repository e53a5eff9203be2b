"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  - CLI flags passed by Click
  2. Env vars     - ``MINTDCTL_*`` prefix, ``__`` for nesting
  3. TOML file    - ``mintdctl.toml`` discovered via walk-up
  4. Code defaults - baked into :class:`ServiceOptions`

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`mintdctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mintdctl.config.discovery import find_config
from mintdctl.config.models import DAEMON_NAME, ServiceOptions


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``mintdctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class MintdctlSettings(BaseSettings):
    """Unified settings for the mintdctl CLI.

    Attributes:
        config_path: The TOML file the settings were loaded from, if any.
        artifact_dir: Where ``deploy`` writes generated artifacts.
        service: The cdk-mintd service options.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MINTDCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    artifact_dir: Path = Path("/etc") / DAEMON_NAME

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    service: ServiceOptions = Field(default_factory=ServiceOptions)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> MintdctlSettings:
        """Construct settings from CLI invocation.

        Discovers ``mintdctl.toml`` via walk-up from *cwd* (or uses the
        explicit *config_path*) and merges CLI flags as highest-priority
        overrides. An explicit path that does not exist is an error.
        """
        toml_path: Path | None = None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                import click

                msg = f"Config file not found: {toml_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(cwd)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
