"""Tests for systemd unit rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from mintdctl.config.models import ServiceOptions
from mintdctl.domain.unit import build_descriptor
from mintdctl.infrastructure.templates import exec_start, render_unit, systemd_value

LAUNCHER = Path("/usr/bin/mintdctl")
LAUNCH_SPEC = Path("/etc/cdk-mintd/cdk-mintd-launch.json")


def _unit(override_root: Path | None = None, **options: object) -> str:
    descriptor = build_descriptor(
        ServiceOptions(**options),
        generated_config=Path("/etc/cdk-mintd/cdk-mintd-abc.toml"),
        environment_file=Path("/etc/cdk-mintd/cdk-mintd.env"),
    )
    return render_unit(
        descriptor, launcher=LAUNCHER, launch_spec=LAUNCH_SPEC, override_root=override_root
    )


class TestSystemdValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, "true"), (False, "false"), (["/a", "/b"], "/a /b"), ("strict", "strict"), (10, "10")],
    )
    def test_formats(self, value: object, expected: str) -> None:
        assert systemd_value(value) == expected

    def test_list_items_with_spaces_are_quoted(self) -> None:
        assert systemd_value(["/srv/my mint", "/b"]) == "'/srv/my mint' /b"


class TestRenderUnit:
    def test_sections(self) -> None:
        lines = _unit().splitlines()
        assert "[Unit]" in lines
        assert "[Service]" in lines
        assert "[Install]" in lines
        assert "Description=CDK Mint Daemon" in lines
        assert "After=network.target" in lines
        assert "WantedBy=multi-user.target" in lines

    def test_service_identity(self) -> None:
        lines = _unit(user="mint", group="mintgrp").splitlines()
        assert "Type=simple" in lines
        assert "User=mint" in lines
        assert "Group=mintgrp" in lines
        assert "WorkingDirectory=/var/lib/cdk-mintd" in lines

    def test_restart_policy(self) -> None:
        lines = _unit().splitlines()
        assert "Restart=always" in lines
        assert "RestartSec=10s" in lines

    def test_sandbox_directives(self) -> None:
        lines = _unit().splitlines()
        assert "NoNewPrivileges=true" in lines
        assert "ProtectSystem=strict" in lines
        assert "ReadWritePaths=/var/lib/cdk-mintd" in lines
        assert "MemoryDenyWriteExecute=true" in lines

    def test_data_dir_with_space(self) -> None:
        lines = _unit(data_dir=Path("/srv/cdk mint")).splitlines()
        assert "ReadWritePaths='/srv/cdk mint'" in lines

    def test_exec_start_runs_launcher(self) -> None:
        expected = f"ExecStart={LAUNCHER} -v launch --descriptor {LAUNCH_SPEC}"
        assert expected in _unit().splitlines()

    def test_log_level_environment(self) -> None:
        assert 'Environment="RUST_LOG=trace"' in _unit(log_level="trace").splitlines()

    def test_environment_file_only_when_set(self) -> None:
        assert "EnvironmentFile=/etc/cdk-mintd/cdk-mintd.env" in _unit(
            environment={"A": "1"}
        ).splitlines()
        assert "EnvironmentFile" not in _unit()

    def test_ends_with_newline(self) -> None:
        assert _unit().endswith("\n")

    def test_operator_override_template(self, tmp_path: Path) -> None:
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "cdk-mintd.service.j2").write_text("# custom {{ d.user }}\n")
        assert _unit(override_root=tmp_path) == "# custom cdk-mintd\n"


class TestExecStart:
    def test_quotes_paths_with_spaces(self) -> None:
        cmd = exec_start(Path("/opt/my tools/mintdctl"), LAUNCH_SPEC)
        assert cmd.startswith("'/opt/my tools/mintdctl' -v launch")
