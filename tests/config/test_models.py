"""Tests for ServiceOptions and LogLevel."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from mintdctl.config.models import LogLevel, ServiceOptions


class TestServiceOptionsDefaults:
    def test_defaults_match_packaged_module(self) -> None:
        opts = ServiceOptions()
        assert opts.enable is False
        assert opts.user == "cdk-mintd"
        assert opts.group == "cdk-mintd"
        assert opts.data_dir == Path("/var/lib/cdk-mintd")
        assert opts.config_file is None
        assert opts.settings == {}
        assert opts.environment == {}
        assert opts.open_firewall is False
        assert opts.log_level is LogLevel.INFO
        assert opts.extra_args == []
        assert opts.mnemonic_file is None
        assert opts.restart_sec == 10

    def test_executable_inside_package(self) -> None:
        opts = ServiceOptions(package=Path("/opt/cdk"))
        assert opts.executable == Path("/opt/cdk/bin/cdk-mintd")

    def test_launcher_defaults_next_to_interpreter(self) -> None:
        assert ServiceOptions().launcher_path == Path(sys.executable).with_name("mintdctl")

    def test_explicit_launcher(self) -> None:
        opts = ServiceOptions(launcher=Path("/usr/local/bin/mintdctl"))
        assert opts.launcher_path == Path("/usr/local/bin/mintdctl")

    def test_frozen(self) -> None:
        opts = ServiceOptions()
        with pytest.raises(ValidationError):
            opts.enable = True  # type: ignore[misc]


class TestLogLevel:
    @pytest.mark.parametrize("level", ["error", "warn", "info", "debug", "trace"])
    def test_accepts_known_levels(self, level: str) -> None:
        assert ServiceOptions(log_level=level).log_level == level

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValidationError):
            ServiceOptions(log_level="verbose")


class TestEnvironment:
    def test_scalars_are_stringified(self) -> None:
        opts = ServiceOptions(
            environment={"PORT": 3338, "RATIO": 0.5, "FLAG": True, "NAME": "mint"}
        )
        assert opts.environment == {
            "PORT": "3338",
            "RATIO": "0.5",
            "FLAG": "true",
            "NAME": "mint",
        }

    def test_rejects_nested_values(self) -> None:
        with pytest.raises(ValidationError):
            ServiceOptions(environment={"BAD": {"nested": 1}})


class TestResolvedSettings:
    def test_defaults_fill_missing_sections(self) -> None:
        tree = ServiceOptions(settings={"info": {"listen_port": 4000}}).resolved_settings()
        assert tree["info"]["listen_port"] == 4000
        assert tree["info"]["listen_host"] == "127.0.0.1"
        assert tree["ln"]["ln_backend"] == "FakeWallet"
        assert tree["database"]["engine"] == "sqlite"

    def test_merge_can_be_disabled(self) -> None:
        opts = ServiceOptions(settings={"info": {"listen_port": 4000}}, merge_default_settings=False)
        assert opts.resolved_settings() == {"info": {"listen_port": 4000}}

    def test_does_not_mutate_options(self) -> None:
        opts = ServiceOptions(settings={"ln": {"ln_backend": "Lnd"}})
        tree = opts.resolved_settings()
        tree["ln"]["ln_backend"] = "Cln"
        assert opts.settings == {"ln": {"ln_backend": "Lnd"}}
