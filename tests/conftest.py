"""Shared pytest fixtures and test helpers for mintdctl tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from mintdctl.config.models import ServiceOptions
from mintdctl.config.settings import MintdctlSettings

VALID_SETTINGS: dict[str, Any] = {
    "info": {"listen_port": 3338},
    "ln": {"ln_backend": "FakeWallet"},
    "database": {"engine": "sqlite"},
}

MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon zoo"
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host MINTDCTL_* variables from leaking into settings under test."""
    import os

    for name in list(os.environ):
        if name.startswith("MINTDCTL_"):
            monkeypatch.delenv(name)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    return tmp_path / "artifacts"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


def make_settings(artifact_dir: Path, **service: Any) -> MintdctlSettings:
    """Build settings in code, bypassing TOML discovery."""
    service.setdefault("enable", True)
    return MintdctlSettings(artifact_dir=artifact_dir, service=ServiceOptions(**service))


@pytest.fixture
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change CWD to a temp dir holding a minimal mintdctl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_config")`` on command test
    classes; the config writes artifacts to ``tmp_path/artifacts``.
    """
    config = tmp_path / "mintdctl.toml"
    config.write_text(
        f'artifact_dir = "{tmp_path / "artifacts"}"\n'
        "\n"
        "[service]\n"
        "enable = true\n"
        f'data_dir = "{tmp_path / "data"}"\n'
        f'launcher = "{tmp_path / "bin" / "mintdctl"}"\n'
    )
    monkeypatch.chdir(tmp_path)
    return config
